from conftest import make_trip_request
from mapa.llm.prompts import DEFAULT_CITIES, build_trip_prompt


def test_prompt_embeds_every_field():
    request = make_trip_request(travelMonth=12, duration=5, budget=75000, currency="PHP")

    prompt = build_trip_prompt(request, "Manila Ninoy Aquino International Airport", "Japan", ["Tokyo", "Osaka"])

    assert "Origin: Manila Ninoy Aquino International Airport" in prompt
    assert "Destination Country: Japan" in prompt
    assert "Cities to visit: Tokyo, Osaka" in prompt
    assert "Travel Month: December" in prompt
    assert "Duration: 5 days" in prompt
    assert "Budget: 75000 PHP" in prompt
    assert "Travel Preferences: food, culture" in prompt
    assert "exactly 5 entries" in prompt
    assert "BUDGET-FRIENDLY" in prompt and "EXPERIENCE-FOCUSED" in prompt
    assert '"dailyPlans"' in prompt and '"totalCost"' in prompt


def test_prompt_defaults_cities_when_none_resolved():
    prompt = build_trip_prompt(make_trip_request(), "MNL", "Japan", [])
    assert f"Cities to visit: {DEFAULT_CITIES}" in prompt


def test_prompt_is_deterministic():
    request = make_trip_request()
    first = build_trip_prompt(request, "Manila", "Japan", ["Tokyo"])
    assert first == build_trip_prompt(request, "Manila", "Japan", ["Tokyo"])
