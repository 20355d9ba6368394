import math
from dataclasses import asdict
from typing import Any, Mapping, Union

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from transectgrid.core.errors import InvalidSiteInput
from transectgrid.models import Site


class SiteRecord(BaseModel):
    name: str = Field(min_length=1)
    region: str = ""
    lat_start: float = Field(ge=-90.0, le=90.0)
    lon_start: float = Field(ge=-180.0, le=180.0)
    base_bearing: float
    base_distance: float = Field(gt=0.0)
    perp_bearing: float
    perp_start: float = Field(ge=0.0)
    perp_spacing: float = Field(gt=0.0)
    perp_distance: float = Field(gt=0.0)

    model_config = {"allow_inf_nan": False, "frozen": True}

    @field_validator("name", "region", mode="before")
    @classmethod
    def coerce_label(cls, v: Any) -> Any:
        # Spreadsheet cells come through as NaN when empty and as numbers for numeric names.
        if v is None or (isinstance(v, float) and math.isnan(v)):
            return ""
        if isinstance(v, (int, float)):
            return str(int(v)) if float(v).is_integer() else str(v)
        return str(v).strip() if isinstance(v, str) else v

    @model_validator(mode="after")
    def check_perp_start(self) -> "SiteRecord":
        if self.perp_start > self.base_distance:
            raise ValueError(
                f"perp_start ({self.perp_start}) must not exceed base_distance ({self.base_distance})"
            )
        return self

    def to_site(self) -> Site:
        return Site(**self.model_dump())


def _flatten(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "record"
        parts.append(f"{loc}: {err.get('msg')}")
    return "; ".join(parts)


def validate_site(record: Union[Site, Mapping[str, Any]]) -> Site:
    """Validate a raw record (or re-check an existing Site) and return an immutable Site."""
    if isinstance(record, Site):
        data = asdict(record)
    elif isinstance(record, Mapping):
        data = dict(record)
    else:
        raise InvalidSiteInput(f"Unsupported record type: {type(record).__name__}")

    name = data.get("name")
    try:
        return SiteRecord(**data).to_site()
    except ValidationError as e:
        raise InvalidSiteInput(_flatten(e), name=str(name) if name is not None else None) from e
