from __future__ import annotations

from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from .errors import ValidationError


class GitContextOptions(BaseModel):
    """Options for get_git_context. camelCase aliases are accepted."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True, strict=True)

    include_untracked: bool = Field(True, alias="includeUntracked")
    max_commits: int = Field(10, gt=0, alias="maxCommits", description="Number of most recent commits")
    diff_context: int = Field(3, ge=0, alias="diffContext", description="Context lines around each hunk")
    sanitize_for_ai: bool = Field(True, alias="sanitizeForAI")


def coerce_options(
    options: GitContextOptions | Mapping[str, Any] | None = None,
    **overrides: Any,
) -> GitContextOptions:
    if isinstance(options, GitContextOptions) and not overrides:
        return options

    data: dict[str, Any] = {}
    if isinstance(options, GitContextOptions):
        data.update(options.model_dump())
    elif options is not None:
        data.update(options)
    data.update(overrides)

    try:
        return GitContextOptions.model_validate(data)
    except PydanticValidationError as e:
        first = e.errors()[0]
        loc = ".".join(str(p) for p in first.get("loc", ()))
        raise ValidationError(f"options.{loc}", f"Invalid git context option {loc}: {first['msg']}") from e
