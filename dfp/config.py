"""
Runtime settings, read from the environment.
Turnarounds and duty periods are hours, like everything else on the program.
"""
import os
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Settings:
    database_url: str = "sqlite:///./dfp.db"
    flight_turnaround: float = 1.2
    ftd_turnaround: float = 0.5
    max_crew_duty_period: float = 12.0
    flying_end_time: float = 18.0
    bucket_dir: Path = Path("data/bucket")


def get_settings() -> Settings:
    return Settings(
        database_url=os.getenv("DATABASE_URL", Settings.database_url),
        flight_turnaround=float(os.getenv("DFP_FLIGHT_TURNAROUND", Settings.flight_turnaround)),
        ftd_turnaround=float(os.getenv("DFP_FTD_TURNAROUND", Settings.ftd_turnaround)),
        max_crew_duty_period=float(os.getenv("DFP_MAX_CREW_DUTY_PERIOD",
                                             Settings.max_crew_duty_period)),
        flying_end_time=float(os.getenv("DFP_FLYING_END_TIME", Settings.flying_end_time)),
        bucket_dir=Path(os.getenv("DFP_BUCKET_DIR", str(Settings.bucket_dir))),
    )
