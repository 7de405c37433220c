"""
Entity records - the rows a host fetches and hands to the browse engine.

Built from store rows with ``Record.model_validate(row, from_attributes=True)``
or from plain dicts. The engine never reads these directly; each catalog pack
registers selector functions over them.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class _Record(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)


class UserRecord(_Record):
    """User account row."""

    id: str
    username: str
    nickname: str
    email: str
    permission: int = 0  # account capability flags
    disabled: int = 0  # 0 = enabled, 1 = disabled
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def status(self) -> str:
        return "disabled" if self.disabled else "enabled"


class CameraRecord(_Record):
    """Camera product row joined with its brand."""

    id: int
    name: str
    brand_id: Optional[int] = None
    brand_name: Optional[str] = None
    release_year: Optional[int] = None
    cinema: bool = False
    created_at: Optional[datetime] = None

    @property
    def camera_type(self) -> str:
        return "cinema" if self.cinema else "camera"


class DynamicRangeRecord(_Record):
    """Dynamic-range measurement joined with its camera and uploader."""

    id: int
    camera_id: int
    brand_name: Optional[str] = None
    camera_name: Optional[str] = None
    user_id: Optional[str] = None
    user_nickname: Optional[str] = None
    ei: Optional[int] = None
    iso: Optional[int] = None
    special_mode: Optional[str] = None
    codec: Optional[str] = None
    log: Optional[str] = None
    bit_depth: Optional[int] = None
    chroma_subsampling: Optional[str] = None
    bitrate: Optional[str] = None
    resolution: Optional[str] = None
    framerate: Optional[float] = None
    crop: Optional[float] = None
    slope_based: Optional[float] = None
    snr1: Optional[float] = None
    snr2: Optional[float] = None
    snr4: Optional[float] = None
    snr10: Optional[float] = None
    snr40: Optional[float] = None


class SpectrometerRecord(_Record):
    id: int
    name: str


class LightRecord(_Record):
    """Light product row joined with brand and series."""

    id: int
    name: str
    brand_name: Optional[str] = None
    series_name: Optional[str] = None
    min_cct: Optional[int] = None
    max_cct: Optional[int] = None
    design_power_input: Optional[int] = None
    modes_available: int = 0  # equipment mode flags
    weight: Optional[float] = None
