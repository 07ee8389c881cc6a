"""
Configuration for the PI-PO line-item reconciliation engine.
"""

# Load environment variables FIRST
from dotenv import load_dotenv
load_dotenv()

import os
from typing import Optional

from pydantic import BaseModel, Field, model_validator


class Config:
    """Base configuration."""

    # Candidate acceptance and tiers
    MATCH_MIN_SCORE: float = float(os.getenv("MATCH_MIN_SCORE", "0.30"))  # Candidates at or below are noise
    TIER_EXACT_THRESHOLD: float = float(os.getenv("TIER_EXACT_THRESHOLD", "0.90"))
    TIER_HIGH_THRESHOLD: float = float(os.getenv("TIER_HIGH_THRESHOLD", "0.70"))
    TIER_MEDIUM_THRESHOLD: float = float(os.getenv("TIER_MEDIUM_THRESHOLD", "0.50"))
    HIGH_CONFIDENCE_PERCENT: int = int(os.getenv("HIGH_CONFIDENCE_PERCENT", "80"))

    # Field weights (must sum to 1.0)
    CODE_WEIGHT: float = 0.40
    NAME_WEIGHT: float = 0.35
    QUANTITY_WEIGHT: float = 0.15
    PRICE_WEIGHT: float = 0.10

    # Field scoring
    QUANTITY_MISMATCH_CREDIT: float = 0.5  # Partial shipments rarely match exactly
    SUBSTRING_SIMILARITY: float = 0.8
    MANUAL_HINT_WEIGHT: float = 0.6  # Operator-entered client PO / item code

    # Matched-field thresholds (audit display)
    MATCHED_CODE_SIMILARITY: float = 0.8
    MATCHED_NAME_SIMILARITY: float = 0.7
    MATCHED_PRICE_VARIANCE: float = 0.10

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    LOG_FILE: str = os.getenv("LOG_FILE", "pipo_matching.log")

    # Data Paths
    PO_DATABASE_PATH: str = os.getenv(
        "PO_DATABASE_PATH",
        os.path.join(os.path.dirname(__file__), "data", "purchase_orders.json"),
    )

    # API Configuration
    API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
    API_PORT: int = int(os.getenv("API_PORT", "8000"))
    API_DEBUG: bool = os.getenv("API_DEBUG", "false").lower() == "true"

    # Workflow Configuration
    GRAPH_RECURSION_LIMIT: int = 25

    def validate(self) -> None:
        """Validate configuration."""
        weights = [self.CODE_WEIGHT, self.NAME_WEIGHT, self.QUANTITY_WEIGHT, self.PRICE_WEIGHT]
        if abs(sum(weights) - 1.0) > 1e-6:
            raise ValueError(f"Field weights must sum to 1.0, got {sum(weights):.3f}")

        if not (self.TIER_EXACT_THRESHOLD > self.TIER_HIGH_THRESHOLD > self.TIER_MEDIUM_THRESHOLD):
            raise ValueError("Tier thresholds must be strictly descending (exact > high > medium)")

        for name in ("MATCH_MIN_SCORE", "TIER_EXACT_THRESHOLD", "TIER_HIGH_THRESHOLD",
                     "TIER_MEDIUM_THRESHOLD", "MANUAL_HINT_WEIGHT", "SUBSTRING_SIMILARITY"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be within [0, 1], got {value}")

        if not 0 <= self.HIGH_CONFIDENCE_PERCENT <= 100:
            raise ValueError(f"Invalid HIGH_CONFIDENCE_PERCENT: {self.HIGH_CONFIDENCE_PERCENT}")

        if self.LOG_LEVEL.upper() not in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
            raise ValueError(f"Invalid LOG_LEVEL: {self.LOG_LEVEL}")


class DevelopmentConfig(Config):
    """Development configuration."""
    LOG_LEVEL = "DEBUG"
    API_DEBUG = True


class ProductionConfig(Config):
    """Production configuration."""
    LOG_LEVEL = "INFO"
    API_DEBUG = False


class TestConfig(Config):
    """Test configuration."""
    LOG_LEVEL = "DEBUG"
    LOG_FILE = ""


def get_config(env: str = None) -> Config:
    """Get configuration based on environment."""
    if env is None:
        env = os.getenv("ENV", "development").lower()

    if env == "production":
        config = ProductionConfig()
    elif env == "test":
        config = TestConfig()
    else:
        config = DevelopmentConfig()

    # Validate configuration on creation
    config.validate()
    return config


class MatchingSettings(BaseModel):
    """
    Matching parameters carried through one reconciliation run.

    Defaults mirror Config; callers may override any value per run.
    """
    min_score: float = Field(default=0.30, ge=0.0, le=1.0)
    tier_exact: float = Field(default=0.90, ge=0.0, le=1.0)
    tier_high: float = Field(default=0.70, ge=0.0, le=1.0)
    tier_medium: float = Field(default=0.50, ge=0.0, le=1.0)
    high_confidence_percent: int = Field(default=80, ge=0, le=100)

    code_weight: float = Field(default=0.40, ge=0.0, le=1.0)
    name_weight: float = Field(default=0.35, ge=0.0, le=1.0)
    quantity_weight: float = Field(default=0.15, ge=0.0, le=1.0)
    price_weight: float = Field(default=0.10, ge=0.0, le=1.0)

    quantity_mismatch_credit: float = Field(default=0.5, ge=0.0, le=1.0)
    substring_similarity: float = Field(default=0.8, ge=0.0, le=1.0)
    manual_hint_weight: float = Field(default=0.6, ge=0.0, le=1.0)

    matched_code_similarity: float = Field(default=0.8, ge=0.0, le=1.0)
    matched_name_similarity: float = Field(default=0.7, ge=0.0, le=1.0)
    matched_price_variance: float = Field(default=0.10, ge=0.0, le=1.0)

    @model_validator(mode="after")
    def check_consistency(self) -> "MatchingSettings":
        total = self.code_weight + self.name_weight + self.quantity_weight + self.price_weight
        if abs(total - 1.0) > 1e-6:
            raise ValueError(f"Field weights must sum to 1.0, got {total:.3f}")
        if not (self.tier_exact > self.tier_high > self.tier_medium):
            raise ValueError("Tier thresholds must be strictly descending (exact > high > medium)")
        return self

    @classmethod
    def from_config(cls, config: Optional[Config] = None) -> "MatchingSettings":
        """Build settings from the environment-driven configuration."""
        if config is None:
            config = get_config()
        return cls(
            min_score=config.MATCH_MIN_SCORE,
            tier_exact=config.TIER_EXACT_THRESHOLD,
            tier_high=config.TIER_HIGH_THRESHOLD,
            tier_medium=config.TIER_MEDIUM_THRESHOLD,
            high_confidence_percent=config.HIGH_CONFIDENCE_PERCENT,
            code_weight=config.CODE_WEIGHT,
            name_weight=config.NAME_WEIGHT,
            quantity_weight=config.QUANTITY_WEIGHT,
            price_weight=config.PRICE_WEIGHT,
            quantity_mismatch_credit=config.QUANTITY_MISMATCH_CREDIT,
            substring_similarity=config.SUBSTRING_SIMILARITY,
            manual_hint_weight=config.MANUAL_HINT_WEIGHT,
            matched_code_similarity=config.MATCHED_CODE_SIMILARITY,
            matched_name_similarity=config.MATCHED_NAME_SIMILARITY,
            matched_price_variance=config.MATCHED_PRICE_VARIANCE,
        )
