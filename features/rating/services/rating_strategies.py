import logging
import math
from abc import ABC, abstractmethod

from features.rating.models.rating_types import RatingInput, WindCondition, WindExposure

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 10

def clamp_rating(value: float) -> int:
    return int(max(MIN_RATING, min(MAX_RATING, value)))

class RatingStrategy(ABC):
    """Maps surf height, wind and period to an integer 1-10 rating."""
    name: str = "base"

    @abstractmethod
    def score(self, inputs: RatingInput) -> float:
        pass

    def rate(self, inputs: RatingInput) -> int:
        rating = clamp_rating(self.score(inputs))
        logger.debug(f"{self.name} rating {rating} for {inputs.model_dump()}")
        return rating

class AdditiveRatingStrategy(RatingStrategy):
    """Starts at 5 and adds bounded adjustments. Used when generating the daily report."""
    name = "additive"

    def score(self, inputs: RatingInput) -> float:
        rating = 5
        height = inputs.surf_height_ft
        wind = inputs.wind_speed_mph
        period = inputs.period_s

        if 3 <= height <= 6:
            rating += 2
        elif 2 <= height < 3:
            rating += 1
        elif 6 < height <= 8:
            rating += 1
        elif height < 2:
            rating -= 2
        else:
            rating -= 1

        exposure = inputs.exposure
        if exposure is WindExposure.OFFSHORE:
            if wind < 15:
                rating += 2
            elif wind < 20:
                rating += 1
        elif exposure is WindExposure.ONSHORE:
            rating -= 2 if wind > 15 else 1

        if period >= 10:
            rating += 1
        elif period < 6:
            rating -= 1

        return rating

class BandedRatingStrategy(RatingStrategy):
    """Wind-condition bucket x height band lookup. Used by the intraday refresh."""
    name = "banded"

    # Rating for chest-to-head-high faces (4.5-6 ft) by condition
    MID_BAND = {
        WindCondition.CLEAN: 8,
        WindCondition.MODERATE: 7,
        WindCondition.MODERATELY_POOR: 6,
        WindCondition.POOR: 5,
        WindCondition.VERY_POOR: 4
    }
    # Overhead+ (>= 7 ft)
    OVERHEAD_BAND = {
        WindCondition.CLEAN: 10,
        WindCondition.MODERATE: 9,
        WindCondition.MODERATELY_POOR: 8,
        WindCondition.POOR: 8,
        WindCondition.VERY_POOR: 7
    }

    @staticmethod
    def wind_condition(inputs: RatingInput) -> WindCondition:
        wind = inputs.wind_speed_mph
        exposure = inputs.exposure

        condition = WindCondition.CLEAN
        if exposure is WindExposure.OFFSHORE:
            if wind < 15:
                condition = WindCondition.CLEAN
            elif wind < 20:
                condition = WindCondition.MODERATE
            else:
                condition = WindCondition.POOR
        elif exposure is WindExposure.ONSHORE:
            if wind < 8:
                condition = WindCondition.CLEAN
            elif wind < 12:
                condition = WindCondition.MODERATELY_POOR
            elif wind < 18:
                condition = WindCondition.POOR
            else:
                condition = WindCondition.VERY_POOR

        if inputs.period_s < 6:
            condition = condition.downgrade()
        return condition

    def score(self, inputs: RatingInput) -> float:
        height = inputs.surf_height_ft
        condition = self.wind_condition(inputs)
        clean = condition is WindCondition.CLEAN

        if height <= 1.5:
            return 2 if clean else 1
        if height <= 3:
            return 4 if clean else max(2, 4 - math.floor(inputs.wind_speed_mph / 10))
        if height < 4.5:
            return 6 if clean else 4
        if height < 7:
            # 6-7 ft shares the chest-to-head-high band
            return self.MID_BAND[condition]
        return self.OVERHEAD_BAND[condition]

RATING_STRATEGIES = {
    AdditiveRatingStrategy.name: AdditiveRatingStrategy,
    BandedRatingStrategy.name: BandedRatingStrategy
}

def get_rating_strategy(name: str) -> RatingStrategy:
    try:
        return RATING_STRATEGIES[name]()
    except KeyError:
        raise ValueError(f"Unknown rating strategy: {name}")
