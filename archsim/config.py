from __future__ import annotations

import os


class Config:
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///archsim.db")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    SIMULATION_TRIALS = int(os.getenv("SIMULATION_TRIALS", "1000"))
    SIMULATION_WORKERS = int(os.getenv("SIMULATION_WORKERS", "1"))
    JITTER_FACTOR = float(os.getenv("JITTER_FACTOR", "0.1"))
    BURST_FACTOR = float(os.getenv("BURST_FACTOR", "0.1"))
    UTILIZATION_THRESHOLD = float(os.getenv("UTILIZATION_THRESHOLD", "0.8"))

    # Request-supplied limits for percentile runs.
    MAX_TRIALS = int(os.getenv("MAX_TRIALS", "100000"))
    MAX_WORKERS = int(os.getenv("MAX_WORKERS", "32"))

    # Upper bound on queue pops per solve before a topology is rejected.
    MAX_RELAXATIONS = int(os.getenv("MAX_RELAXATIONS", "1000000"))
