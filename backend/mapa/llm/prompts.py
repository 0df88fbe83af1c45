import textwrap
from typing import Sequence

from mapa.models.schemas import TripRequest

MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]

DEFAULT_CITIES = "Major tourist cities"

_DAY_SHAPE = """\
      {{
        "day": number,
        "activities": [
          {{"time": string, "description": string, "cost": number}},
          {{"time": string, "description": string, "cost": number}},
          {{"time": string, "description": string, "cost": number}}
        ],
        "accommodation": {{"name": string, "cost": number}},
        "meals": {{
          "breakfast": {{"description": string, "cost": number}},
          "lunch": {{"description": string, "cost": number}},
          "dinner": {{"description": string, "cost": number}}
        }}
      }}"""

TRIP_PROMPT_TEMPLATE = textwrap.dedent(
    """\
    You are an expert travel planner for Filipino tourists traveling internationally.
    Create detailed trip itineraries for a trip with the following details:

    TRIP DETAILS:
    - Origin: {origin}
    - Destination Country: {destination}
    - Cities to visit: {cities}
    - Travel Month: {month}
    - Duration: {duration} days
    - Budget: {budget} {currency}
    - Travel Preferences: {preferences}

    TASK:
    Create TWO different itineraries for the same trip:
    1. A BUDGET-FRIENDLY itinerary that maximizes value for money
    2. An EXPERIENCE-FOCUSED itinerary that prioritizes unique experiences and comfort

    For EACH itinerary, include:
    - A short summary of the approach (budget vs experience)
    - A day-by-day plan with exactly {duration} entries, numbered 1 to {duration}, each with:
      * Morning, afternoon, and evening activities with estimated costs
      * Accommodation details with cost per night
      * Meal suggestions (breakfast, lunch, dinner) with estimated costs
    - A total estimated cost for the entire trip

    FORMAT INSTRUCTIONS:
    Respond with EXACTLY one valid JSON object and nothing else, matching this schema:

    {{
      "tripName": string,
      "budgetItinerary": {{
        "summary": string,
        "dailyPlans": [
    {day_shape}
        ],
        "totalCost": number
      }},
      "experienceItinerary": {{
        "summary": string,
        "dailyPlans": [
    {day_shape}
        ],
        "totalCost": number
      }}
    }}

    All costs are numbers in {currency}. Do NOT include comments, markdown, backticks or any text outside the JSON object.
    """
)


def build_trip_prompt(
    request: TripRequest,
    origin_airport_name: str,
    destination_country_name: str,
    city_names: Sequence[str],
) -> str:
    """Render the instruction block for one trip request. Same input, same text."""
    return TRIP_PROMPT_TEMPLATE.format(
        origin=origin_airport_name,
        destination=destination_country_name,
        cities=", ".join(city_names) or DEFAULT_CITIES,
        month=MONTH_NAMES[request.travel_month - 1],
        duration=request.duration,
        budget=request.budget,
        currency=request.currency,
        preferences=", ".join(request.preferences),
        day_shape=_DAY_SHAPE.format(),
    )
