from pydantic import BaseModel, ConfigDict, Field

# =============================================================================
# Clip audio
# =============================================================================


class AudioConfig(BaseModel):
    clip_id: str
    volume: float = Field(default=1.0, ge=0, le=2)  # 1 = unity gain
    fade_in: float = Field(default=0.0, ge=0)  # seconds
    fade_out: float = Field(default=0.0, ge=0)  # seconds
    muted: bool = False
    pan: float = Field(default=0.0, ge=-1, le=1)  # -1 left, 1 right


class WaveformData(BaseModel):
    """Normalized peak envelope of a clip's audio."""
    model_config = ConfigDict(frozen=True)

    peaks: tuple[float, ...] = ()
    sample_rate: int = 48000
    duration: float = 0.0  # seconds
    channels: int = 2


# =============================================================================
# Mixer
# =============================================================================


class AudioMixerTrack(BaseModel):
    track_id: str
    name: str = ""
    volume: float = Field(default=1.0, ge=0, le=2)
    muted: bool = False
    solo: bool = False
    pan: float = Field(default=0.0, ge=-1, le=1)


class AudioMixerState(BaseModel):
    tracks: list[AudioMixerTrack] = Field(default_factory=list)
    master_volume: float = Field(default=1.0, ge=0, le=2)
    master_mute: bool = False
    has_solo: bool = False  # Derived: any track soloed
