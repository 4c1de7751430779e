# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-08
# Updated: 2026-10-12
# Description: Config
# -----------------------------------------------------------------------------

from dataclasses import dataclass
from dotenv import load_dotenv, find_dotenv

from settings import _env, _env_float, _env_int

# Load .env once globally
load_dotenv(find_dotenv(usecwd=True), override=False)

LOCAL_DEFAULT_MODEL = "sentence-transformers/all-MiniLM-L6-v2"
OPENAI_DEFAULT_MODEL = "text-embedding-3-small"


@dataclass(frozen=True)
class Config:
    # Embedding provider
    embed_provider: str = "local"
    embed_model: str = LOCAL_DEFAULT_MODEL

    # OpenAI (direct)
    openai_api_key: str = ""
    openai_base_url: str = ""

    # Azure OpenAI
    openai_azure_api_key: str = ""
    openai_azure_endpoint: str = ""
    openai_api_version: str = "2024-10-21"

    # Ranking / cache behaviour
    expected_dim: int = 384
    provider_concurrency: int = 1
    provider_timeout_s: float = 30.0
    cache_max_entries: int = 0
    default_top_k: int = 5

    # Case data (read-only snapshot file)
    cases_file: str = "./data/cases.json"

    # ---- Single source of truth: field_name -> ENV VAR NAME ----
    ENV_VARS = {
        "embed_provider": "HRCM_EMBED_PROVIDER",
        "embed_model": "HRCM_EMBED_MODEL",

        "openai_api_key": "OPENAI_API_KEY",
        "openai_base_url": "OPENAI_BASE_URL",

        "openai_azure_api_key": "AZURE_OPENAI_API_KEY",
        "openai_azure_endpoint": "AZURE_OPENAI_ENDPOINT",
        "openai_api_version": "AZURE_OPENAI_API_VERSION",

        "expected_dim": "HRCM_EXPECTED_DIM",
        "provider_concurrency": "HRCM_PROVIDER_CONCURRENCY",
        "provider_timeout_s": "HRCM_PROVIDER_TIMEOUT_S",
        "cache_max_entries": "HRCM_CACHE_MAX_ENTRIES",
        "default_top_k": "HRCM_DEFAULT_TOP_K",

        "cases_file": "HRCM_CASES_FILE",
    }

    PROVIDERS = ("local", "openai", "azure")

    @staticmethod
    def from_env() -> "Config":
        """Build Config object from environment variables."""
        env = Config.ENV_VARS
        provider = _env(env["embed_provider"], "local").lower()
        default_model = LOCAL_DEFAULT_MODEL if provider == "local" else OPENAI_DEFAULT_MODEL

        return Config(
            embed_provider=provider,
            embed_model=_env(env["embed_model"], default_model),
            openai_api_key=_env(env["openai_api_key"]),
            openai_base_url=_env(env["openai_base_url"]),
            openai_azure_api_key=_env(env["openai_azure_api_key"]),
            openai_azure_endpoint=_env(env["openai_azure_endpoint"]),
            openai_api_version=_env(env["openai_api_version"], "2024-10-21"),
            expected_dim=_env_int(env["expected_dim"], 384),
            provider_concurrency=_env_int(env["provider_concurrency"], 1),
            provider_timeout_s=_env_float(env["provider_timeout_s"], 30.0),
            cache_max_entries=_env_int(env["cache_max_entries"], 0),
            default_top_k=_env_int(env["default_top_k"], 5),
            cases_file=_env(env["cases_file"], "./data/cases.json"),
        )

    def __post_init__(self):
        """
        Fail fast on values the ranking core cannot work with.
        Credentials are only required for the provider actually selected.
        """
        if self.embed_provider not in self.PROVIDERS:
            raise ValueError(
                f"{self.ENV_VARS['embed_provider']} must be one of {self.PROVIDERS}, "
                f"got {self.embed_provider!r}"
            )
        if not self.embed_model:
            raise ValueError(f"Missing required environment variable: {self.ENV_VARS['embed_model']}")

        missing_fields = []
        if self.embed_provider == "openai" and not self.openai_api_key:
            missing_fields.append("openai_api_key")
        if self.embed_provider == "azure":
            missing_fields += [
                f for f in ("openai_azure_api_key", "openai_azure_endpoint") if not getattr(self, f)
            ]
        if missing_fields:
            missing_env_vars = [self.ENV_VARS[f] for f in missing_fields]
            raise ValueError(f"Missing required environment variables: {missing_env_vars}")

        if self.provider_concurrency < 1:
            raise ValueError("provider_concurrency must be >= 1")
        if self.default_top_k < 1:
            raise ValueError("default_top_k must be >= 1")
        if self.provider_timeout_s < 0:
            raise ValueError("provider_timeout_s must be >= 0 (0 disables the timeout)")
        if self.cache_max_entries < 0:
            raise ValueError("cache_max_entries must be >= 0 (0 means unbounded)")
        if self.expected_dim < 0:
            raise ValueError("expected_dim must be >= 0 (0 disables the check)")

    @property
    def timeout(self) -> float | None:
        return self.provider_timeout_s or None

    def summary(self) -> dict:
        """Return a safe, non-sensitive summary for logging."""
        return {
            "embed_provider": self.embed_provider,
            "embed_model": self.embed_model,
            "openai_base_url": self.openai_base_url,
            "openai_azure_endpoint": self.openai_azure_endpoint,
            "expected_dim": self.expected_dim,
            "provider_concurrency": self.provider_concurrency,
            "provider_timeout_s": self.provider_timeout_s,
            "cache_max_entries": self.cache_max_entries,
            "default_top_k": self.default_top_k,
            "cases_file": self.cases_file,
        }
