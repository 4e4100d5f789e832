"""Narrative builder for the daily surf report.

Everything here is pure: the same inputs (including the seed and the
current wall-clock time) always produce the same text.
"""
from typing import List, Optional, Sequence
from pydantic import BaseModel

from features.tides.models.tide_types import TideEvent
from features.rating.models.rating_types import WindExposure

class ReportTextInput(BaseModel):
    surf_display: Optional[str] = None  # e.g. "2.5-3.0 ft"
    face_height_ft: float = 0.0
    period_s: float = 0.0
    wind_speed_mph: float = 0.0
    wind_direction: str = "Variable"
    swell_direction: str = "Variable"
    water_temp_f: float = 0.0
    water_temp: str = "N/A"
    wind_speed: str = "N/A"
    weather_conditions: Optional[str] = None
    air_temp_f: Optional[float] = None
    rating: int = 1
    historical_date: Optional[str] = None
    forecast_source: str = "actual"
    forecast_confidence: Optional[float] = None
    tides: List[TideEvent] = []
    now_time: str = "00:00"  # HH:MM local
    seed: int = 0

OPENINGS = {
    8: [
        "It's absolutely firing out there!",
        "Epic conditions today!",
        "You gotta see this - it's going off!",
        "Premium surf conditions right now!",
    ],
    6: [
        "Looking pretty fun out there today.",
        "Decent waves rolling through.",
        "Not bad at all - worth checking out.",
        "Solid conditions for a session.",
    ],
    4: [
        "Small but rideable conditions.",
        "Pretty mellow out there.",
        "Manageable conditions for all levels.",
        "Modest swell but still surfable.",
    ],
    0: [
        "Pretty flat today.",
        "Not much happening.",
        "Minimal surf conditions.",
        "Quiet conditions out there.",
    ],
}

# (minimum face height, size phrases, clean phrases, textured phrases)
SURF_SIZE = [
    (7, [
        "We're seeing a massive {swell} swell with rideable faces stacking up overhead at {size}.",
        "A powerful {swell} swell is producing overhead rideable faces measuring {size}.",
        "Significant {swell} energy with rideable wave faces reaching {size} overhead.",
    ], [
        "The faces are clean and well-formed, offering powerful rides with plenty of push.",
        "Wave faces are pristine and organized, delivering powerful, makeable sections.",
        "Clean, well-shaped faces providing excellent power and ride potential.",
    ], [
        "The wind is creating some texture on the faces, challenging but rideable for experienced surfers.",
        "Wind-affected faces add complexity, best suited for advanced surfers.",
        "Some texture on the faces from wind, creating challenging but manageable conditions.",
    ]),
    (4.5, [
        "A solid {swell} swell is delivering chest to head high rideable faces at {size}.",
        "Quality {swell} swell producing rideable wave faces around {size}, chest to head high.",
        "{swell} swell energy creating rideable faces measuring {size}, chest to overhead.",
    ], [
        "The wave faces are glassy and well-shaped, perfect for carving and generating speed.",
        "Clean, organized faces ideal for performance surfing and speed generation.",
        "Glassy wave faces offering excellent shape for maneuvers.",
    ], [
        "There's some wind chop on the faces, but the size makes up for it with plenty of power.",
        "Wind texture present on faces, though size compensates with good push.",
        "Faces show some bump from wind, but power remains solid.",
    ]),
    (2, [
        "A small {swell} swell is producing waist to chest high rideable faces at {size}.",
        "Modest {swell} swell with rideable wave faces around {size}, waist to chest high.",
        "{swell} swell creating rideable faces measuring {size}, waist to chest level.",
    ], [
        "The conditions are clean and organized, ideal for practicing maneuvers and longboarding.",
        "Clean, well-organized faces perfect for skill development and longboard sessions.",
        "Smooth, organized wave faces great for technique work and cruising.",
    ], [
        "The wind is adding some bump to the faces, a bit choppy but still fun.",
        "Wind-induced texture on faces creates bumpy but surfable conditions.",
        "Some chop on the faces from wind, though still enjoyable.",
    ]),
    (1, [
        "Minimal swell with ankle to knee high rideable faces at {size}.",
        "Small energy producing rideable wave faces around {size}, ankle to knee high.",
        "Limited swell creating rideable faces measuring {size}, ankle to knee level.",
    ], [
        "Despite the small size, the faces are smooth - perfect for beginners or longboard cruising.",
        "Clean, small faces ideal for learning or mellow longboard sessions.",
        "Smooth wave faces great for beginner practice or relaxed cruising.",
    ], [
        "The small size combined with wind chop makes it challenging, best for practicing pop-ups.",
        "Wind texture on small faces creates tricky conditions, good for fundamentals practice.",
        "Choppy small faces best suited for basic technique work.",
    ]),
    (0, [
        "Very minimal swell with rideable faces barely reaching ankle high at {size}.",
        "Extremely limited energy with rideable wave faces at {size}, barely ankle high.",
        "Negligible swell producing rideable faces measuring {size}, ankle high or less.",
    ], [
        "Better suited for swimming or stand-up paddleboarding than surfing today.",
        "Consider alternative water activities like SUP or swimming.",
        "Not ideal for surfing - better for other ocean activities.",
    ], [
        "Better suited for swimming or stand-up paddleboarding than surfing today.",
        "Consider alternative water activities like SUP or swimming.",
        "Not ideal for surfing - better for other ocean activities.",
    ]),
]

PERIOD_PHRASES = [
    (12, [
        "The wave period is {period} seconds, long-period groundswell that packs serious punch with well-defined sets.",
        "At {period} seconds, the period indicates premium groundswell energy with powerful, well-spaced sets.",
        "A {period} second period shows quality long-interval swell with strong push and organized sets.",
    ]),
    (10, [
        "Wave period is {period} seconds, a good quality swell with decent power and organized sets.",
        "At {period} seconds, the period shows solid swell quality with respectable energy.",
        "A {period} second period reflects good swell with reliable power delivery.",
    ]),
    (8, [
        "Wave period is {period} seconds, providing moderate energy with reasonably spaced sets.",
        "At {period} seconds, the period indicates moderate swell energy and acceptable set intervals.",
        "A {period} second period shows mid-range energy with decent set spacing.",
    ]),
    (6, [
        "Wave period is {period} seconds, on the shorter side - more frequent but less powerful waves.",
        "At {period} seconds, the shorter period means more waves but reduced power and ride length.",
        "A {period} second period indicates wind swell with limited power per wave.",
    ]),
    (0, [
        "Short wave period at {period} seconds means choppy, wind-driven waves with quick, bumpy rides.",
        "At {period} seconds, the brief period reflects wind-generated chop with minimal energy.",
        "A {period} second period shows wind swell with choppy conditions and limited ride potential.",
    ]),
]

OFFSHORE_WIND = [
    (5, "Nearly calm offshore winds at {speed} mph from the {direction} are creating pristine, glassy conditions."),
    (10, "Light offshore winds at {speed} mph from the {direction} are grooming the wave faces beautifully."),
    (15, "Moderate offshore winds at {speed} mph from the {direction} are holding up the faces, though it might get gusty."),
    (20, "Strong offshore winds at {speed} mph from the {direction} clean up the faces but make paddling out hard."),
    (None, "Very strong offshore winds at {speed} mph from the {direction} are blowing the tops off the waves."),
]

ONSHORE_WIND = [
    (5, "Nearly calm onshore winds at {speed} mph from the {direction} aren't causing much texture."),
    (8, "Light onshore winds at {speed} mph from the {direction} add slight texture but nothing too disruptive."),
    (12, "Moderate onshore winds at {speed} mph from the {direction} are creating noticeable chop on the faces."),
    (18, "Strong onshore winds at {speed} mph from the {direction} are making conditions choppy and disorganized."),
    (None, "Very strong onshore winds at {speed} mph from the {direction} are creating blown-out conditions."),
]

WETSUIT_ADVICE = [
    (75, "which is warm and comfortable - boardshorts or a spring suit will do."),
    (68, "which is pleasant - a spring suit or thin wetsuit recommended."),
    (60, "which is cool - a 3/2mm wetsuit is recommended for comfort."),
    (50, "which is cold - you'll want a 4/3mm wetsuit with booties."),
]
FREEZING_ADVICE = "which is very cold - a 5/4mm wetsuit with hood, gloves, and booties is essential."

CLOSINGS = {
    8: [
        "Drop everything and get out here! These are the conditions you dream about.",
        "This is the one you don't want to miss! Everything is lining up perfectly.",
        "Absolutely worth the session! Premium conditions like this don't come around often.",
    ],
    6: [
        "Definitely worth checking out if you've got time. You'll get some quality rides.",
        "Should be a fun session. Nothing epic, but good enough to make it worth your while.",
        "Worth the paddle out. Clean enough with enough size to make it enjoyable.",
    ],
    4: [
        "Could be fun for beginners or longboarders. Bring the log and enjoy some mellow rides.",
        "Decent for a mellow session. Great for working on technique.",
        "Not epic but rideable. Perfect for a casual session or teaching someone.",
    ],
    0: [
        "Maybe wait for the next swell. Check back tomorrow or later this week.",
        "Check back tomorrow, might be better. Save your energy for when conditions improve.",
        "Not really worth it today. Better to wait for a better swell.",
    ],
}

NO_WAVE_DATA = [
    "The wave sensors on the buoy aren't reporting right now, so we can't give you rideable face heights or periods. "
    "The buoy is online though - winds are {wind} from the {direction}, water temp is {water}, and weather is {weather}. "
    "Check local surf cams or head to the beach to see what's actually happening out there!",
    "Wave sensors are offline on the buoy today, so no rideable face data available. "
    "Wind is {wind} from the {direction}, water's at {water}, and it's {weather}. "
    "Your best bet is to check the beach in person or look at surf cams for current conditions.",
    "Buoy wave sensors are down at the moment - can't pull rideable face data. "
    "However, wind conditions show {wind} from the {direction}, water temperature is {water}, and the weather is {weather}. "
    "Recommend checking visual reports or heading down to scout it yourself.",
]

def pick(options: Sequence[str], seed: int) -> str:
    """Deterministic variant selection."""
    return options[seed % len(options)]

def _by_rating(table: dict, rating: int) -> List[str]:
    for threshold in sorted(table, reverse=True):
        if rating >= threshold:
            return table[threshold]
    return table[0]

def tide_summary(tides: Sequence[TideEvent]) -> str:
    if not tides:
        return "Tide data unavailable"
    return ", ".join(t.summary() for t in tides)

def is_clean(exposure: Optional[WindExposure], wind_speed_mph: float) -> bool:
    if exposure is WindExposure.OFFSHORE:
        return wind_speed_mph < 15
    return wind_speed_mph < 8

def current_tide_phase(tides: Sequence[TideEvent], now_time: str) -> str:
    for current, following in zip(tides, tides[1:]):
        if current.time <= now_time < following.time:
            if current.type.lower() == "low":
                return (
                    f"Currently on an incoming tide (rising from {current.height}{current.height_unit} low "
                    f"to {following.height}{following.height_unit} high at {following.time})."
                )
            return (
                f"Currently on an outgoing tide (dropping from {current.height}{current.height_unit} high "
                f"to {following.height}{following.height_unit} low at {following.time})."
            )
    return ""

def forecast_source_sentence(source: str, confidence: Optional[float]) -> str:
    if source == "actual":
        return "Size and period come straight from the latest buoy readings."
    if source == "ai_prediction":
        if confidence is not None:
            return f"Size is a trend-model prediction ({confidence:.0%} confidence)."
        return "Size is a trend-model prediction."
    if source == "buoy_estimation":
        return "Size is estimated from the most recent buoy swell reading."
    return "Size is a seasonal baseline; no recent readings were available."

def generate_no_wave_data_text(
    wind_speed: str,
    wind_direction: str,
    water_temp: str,
    weather_conditions: Optional[str],
    seed: int
) -> str:
    weather = (weather_conditions or "Weather data unavailable").lower()
    return pick(NO_WAVE_DATA, seed).format(
        wind=wind_speed or "N/A",
        direction=wind_direction or "Variable",
        water=water_temp or "N/A",
        weather=weather
    )

def _surf_section(data: ReportTextInput, clean: bool) -> str:
    size = f"{data.surf_display.replace(' ft', '')} feet"
    for minimum, sizes, clean_phrases, textured_phrases in SURF_SIZE:
        if data.face_height_ft >= minimum:
            follow = clean_phrases if clean else textured_phrases
            return (
                f"{pick(sizes, data.seed).format(swell=data.swell_direction, size=size)} "
                f"{pick(follow, data.seed)}"
            )
    return ""

def _period_sentence(data: ReportTextInput) -> str:
    if data.period_s <= 0:
        return ""
    for minimum, phrases in PERIOD_PHRASES:
        if data.period_s >= minimum:
            return pick(phrases, data.seed).format(period=f"{data.period_s:.0f}")
    return ""

def _wind_sentence(data: ReportTextInput, exposure: Optional[WindExposure]) -> str:
    table = OFFSHORE_WIND if exposure is WindExposure.OFFSHORE else ONSHORE_WIND
    for limit, phrase in table:
        if limit is None or data.wind_speed_mph < limit:
            return phrase.format(speed=f"{data.wind_speed_mph:.0f}", direction=data.wind_direction)
    return ""

def _weather_section(data: ReportTextInput) -> str:
    conditions = (data.weather_conditions or "Weather data unavailable").lower()
    text = f"Current conditions are {conditions}"
    if data.air_temp_f is not None:
        text += f" with air temperature at {data.air_temp_f:.0f}°F"
    text += f". Water temperature is {data.water_temp}"
    if data.water_temp_f > 0:
        advice = next((a for limit, a in WETSUIT_ADVICE if data.water_temp_f >= limit), FREEZING_ADVICE)
        text += f", {advice}"
    else:
        text += "."
    return text

def _tide_section(data: ReportTextInput) -> str:
    if not data.tides:
        return ""
    parts = []
    phase = current_tide_phase(data.tides, data.now_time)
    if phase:
        parts.append(phase)
    schedule = ", ".join(
        f"{'High' if t.type.lower() == 'high' else 'Low'} tide at {t.time} ({t.height}{t.height_unit})"
        for t in data.tides
    )
    parts.append(f"Today's tide schedule: {schedule}.")
    if data.face_height_ft >= 4:
        parts.append("With this size swell, mid to high tide will offer the best shape and power.")
    elif data.face_height_ft >= 2:
        parts.append("Mid tide usually offers the best balance of wave shape and rideable sections.")
    else:
        parts.append("Low to mid tide might give you the best chance at catching the available waves.")
    return " ".join(parts)

def generate_report_text(data: ReportTextInput) -> str:
    """Assemble the multi-section narrative for one report."""
    if not data.surf_display or data.surf_display == "N/A":
        return generate_no_wave_data_text(
            data.wind_speed, data.wind_direction, data.water_temp, data.weather_conditions, data.seed
        )

    exposure = WindExposure.from_direction(data.wind_direction)
    clean = is_clean(exposure, data.wind_speed_mph)

    opening = pick(_by_rating(OPENINGS, data.rating), data.seed)
    if data.historical_date:
        opening += (
            f" (Note: Wave sensors are currently offline, using rideable face data from "
            f"{data.historical_date}. Current wind and water conditions are up to date.)"
        )

    surf = " ".join(s for s in (_surf_section(data, clean), _period_sentence(data)) if s)
    sections = [
        opening,
        f"🌊 SURF CONDITIONS: {surf}",
        f"💨 WIND CONDITIONS: {_wind_sentence(data, exposure)}",
        f"☀️ WEATHER: {_weather_section(data)}",
        f"📡 FORECAST SOURCE: {forecast_source_sentence(data.forecast_source, data.forecast_confidence)}",
    ]
    tide = _tide_section(data)
    if tide:
        sections.append(f"🌙 TIDE SCHEDULE: {tide}")
    sections.append(f"📋 RECOMMENDATION: {pick(_by_rating(CLOSINGS, data.rating), data.seed)}")
    return "\n\n".join(sections)
