# === FILE: a11y_scout/config.py ===
"""
Loading and validation of A11yScout run configuration and sites files.
Pydantic describes the schema; YAML and JSON files are both accepted.
"""
from __future__ import annotations

import errno
import json
import os
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, List, Literal, Optional, Sequence, Tuple, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
)

from a11y_scout.logger import logger
from a11y_scout.sampling import SampleConfig, resolve_sample_seed
from a11y_scout.utils import DEFAULT_SKIP_EXTENSIONS, normalize_url

ScanMode = Literal["sitemap", "crawl", "list"]

MAX_PAGES_LIMIT = 200
DEFAULT_MAX_PAGES = 50
#: hard ceiling for child sitemaps fetched out of one sitemap index
MAX_CHILD_SITEMAPS = 10


@dataclass(frozen=True, slots=True)
class Target:
    """One configured entry point, read-only once built."""

    raw_input: str
    normalized_url: str
    mode: ScanMode


def _split_list(value: Any, sep: str) -> Any:
    if isinstance(value, str):
        return [part.strip() for part in value.split(sep) if part.strip()]
    return value


class RunConfig(BaseModel):
    """Configuration of a single scan run."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    mode: ScanMode = Field("sitemap", description="How pages are discovered.")
    base_url: str = Field("", description="Site root; prepended to urls unless mode is 'list'.")
    urls: Tuple[str, ...] = Field((), description="Extra targets (list or newline-separated).")
    label: str = Field("", description="Stable site identity, also the default sample seed.")
    max_pages: int = Field(DEFAULT_MAX_PAGES, description=f"Page cap, clamped to [1, {MAX_PAGES_LIMIT}].")
    timeout_ms: int = Field(30_000, gt=0, description="Per-page navigation timeout (ms).")
    fetch_timeout: float = Field(15.0, gt=0, description="Timeout for raw sitemap/HTML fetches (s).")
    concurrency: int = Field(2, ge=1, description="Pages scanned simultaneously.")
    retry_times: int = Field(2, ge=0, description="Retries for raw fetches on 5xx/429.")
    user_agent: str = Field("A11yScout/1.0", min_length=1, description="User-Agent header.")
    viewport: Literal["desktop", "mobile"] = "desktop"
    color_scheme: Literal["light", "dark"] = "light"
    browser: Literal["chromium", "firefox", "webkit"] = "chromium"
    sitemap_sample_strategy: Literal["shuffle", "sequential"] = "shuffle"
    sitemap_sample_seed: str = Field("", description="Empty → derived from label/base URL/host.")
    skip_extensions: Tuple[str, ...] = Field(DEFAULT_SKIP_EXTENSIONS)
    sitemap_fallback_to_crawl: bool = True
    sitemap_max_depth: int = Field(3, ge=0, description="Nested sitemap-index levels followed.")
    sitemap_max_children: int = Field(MAX_CHILD_SITEMAPS, ge=1, le=MAX_CHILD_SITEMAPS)
    axe_script: Optional[str] = Field(None, description="Local path or URL of axe.min.js.")

    @field_validator("max_pages", mode="before")
    def _clamp_max_pages(cls, v: Any) -> Any:
        try:
            value = int(v)
        except (TypeError, ValueError):
            return v
        return max(1, min(MAX_PAGES_LIMIT, value))

    @field_validator("urls", mode="before")
    def _split_urls(cls, v: Any) -> Any:
        return _split_list(v, "\n")

    @field_validator("skip_extensions", mode="before")
    def _split_extensions(cls, v: Any) -> Any:
        v = _split_list(v, ",")
        if isinstance(v, (list, tuple)):
            return tuple(str(e).strip().lower().lstrip(".") for e in v if str(e).strip())
        return v

    @field_validator("base_url", mode="before")
    def _strip_base_url(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip()
        return v

    # ------------------------------------------------------------------ #

    def raw_targets(self) -> List[str]:
        """Raw target strings in scan order; list mode scans only ``urls``."""
        raw = list(self.urls)
        if self.base_url and self.mode != "list":
            raw.insert(0, self.base_url)
        return raw

    def targets(self) -> List[Target]:
        """Normalized targets; unparsable entries are logged and dropped."""
        result: List[Target] = []
        for raw in self.raw_targets():
            normalized = normalize_url(raw)
            if not normalized:
                logger.warning("Skipping invalid target URL: %r", raw)
                continue
            result.append(Target(raw_input=raw, normalized_url=normalized, mode=self.mode))
        return result

    def sample_config(self, url: Optional[str] = None) -> SampleConfig:
        """Sampling parameters for a sitemap discovered at *url*."""
        seed = resolve_sample_seed(
            provided_seed=self.sitemap_sample_seed,
            label=self.label,
            base_url=self.base_url,
            url=url,
        )
        return SampleConfig(max_pages=self.max_pages, strategy=self.sitemap_sample_strategy, seed=seed)

    def with_overrides(self, **overrides: Any) -> RunConfig:
        """Validated copy with *overrides* applied (``None`` values are ignored)."""
        data = self.model_dump()
        data.update({k: v for k, v in overrides.items() if v is not None})
        return RunConfig(**data)


# --------------------------------------------------------------------------- #
# Sites file                                                                  #
# --------------------------------------------------------------------------- #


_LABEL_RE = re.compile(r"[^a-z0-9.-]+")


def sanitize_label(text: str) -> str:
    """Lower-case *text* and collapse anything outside ``[a-z0-9.-]`` into single dashes."""
    label = _LABEL_RE.sub("-", (text or "").lower())
    return re.sub(r"-{2,}", "-", label).strip("-")


def build_run_id(label: str = "", now: Optional[datetime] = None) -> str:
    """``2024-01-02T06-00-00-000Z--<label>``; the label part is omitted when empty."""
    moment = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    stamp = moment.strftime("%Y-%m-%dT%H-%M-%S-") + f"{moment.microsecond // 1000:03d}Z"
    clean = sanitize_label(label)
    return f"{stamp}--{clean}" if clean else stamp


class SiteEntry(BaseModel):
    """One site of a sites file. Unknown keys (e.g. ``schedule``) are ignored."""
    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    name: str = Field(..., min_length=1)
    base_url: str = Field("", alias="baseUrl")
    mode: ScanMode = "sitemap"
    urls: Tuple[str, ...] = ()
    max_pages: int = Field(DEFAULT_MAX_PAGES, alias="maxPages")
    label: str = Field("", validate_default=True)
    notes: str = ""

    @field_validator("max_pages", mode="before")
    def _default_max_pages(cls, v: Any) -> Any:
        return DEFAULT_MAX_PAGES if v is None else v

    @field_validator("urls", mode="before")
    def _none_urls(cls, v: Any) -> Any:
        return () if v is None else v

    @field_validator("label")
    def _sanitize_label(cls, v: str, info: ValidationInfo) -> str:
        return sanitize_label(v or info.data.get("name", ""))

    def to_run_config(self, base: Optional[RunConfig] = None) -> RunConfig:
        return (base or RunConfig()).with_overrides(
            base_url=self.base_url,
            mode=self.mode,
            urls=list(self.urls),
            max_pages=self.max_pages,
            label=self.label,
        )


def load_sites(path: Union[str, Path]) -> List[SiteEntry]:
    """Read a YAML sites file with a top-level ``sites`` list."""
    path_obj = Path(path).expanduser().resolve()
    if not path_obj.is_file():
        raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))
    data = _read_yaml(path_obj)
    sites = data.get("sites")
    if not isinstance(sites, list):
        raise ValueError(f'{path_obj} must contain a top-level "sites" list')
    entries: List[SiteEntry] = []
    for raw in sites:
        if not isinstance(raw, dict):
            raise TypeError(f"Each site entry must be a mapping, got {type(raw).__name__}")
        entries.append(SiteEntry(**raw))
    return entries


def resolve_site(sites: Sequence[SiteEntry], name: str, allow_adhoc: bool = True) -> Optional[SiteEntry]:
    """Find a site by name or label; build an ad-hoc sitemap entry if allowed."""
    for site in sites:
        if name in (site.name, site.label):
            return site
    if not allow_adhoc:
        return None
    logger.info("Site %s not in sites file, using ad-hoc target", name)
    return SiteEntry(name=name, base_url=normalize_url(name), mode="sitemap")


# --------------------------------------------------------------------------- #
# Config files                                                                #
# --------------------------------------------------------------------------- #

_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Malformed YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of YAML must be a mapping, got {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Malformed JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of JSON must be a mapping, got {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None]) -> RunConfig:
    """
    Read YAML or JSON and return a validated RunConfig.
    With no path, ``configs/default.yaml`` is used when present, defaults otherwise.
    """
    if path is None:
        if not _DEFAULT_CFG.exists():
            return RunConfig()
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Unsupported config format: {suffix}")

    return RunConfig(**data)


__all__ = [
    "ScanMode",
    "Target",
    "RunConfig",
    "SiteEntry",
    "MAX_PAGES_LIMIT",
    "MAX_CHILD_SITEMAPS",
    "sanitize_label",
    "build_run_id",
    "load_config",
    "load_sites",
    "resolve_site",
]
