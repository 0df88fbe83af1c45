"""Static reference content and an idempotent loader for it."""
import logging
from typing import Dict

from mapa.models.domain import Airport, City, Country, Currency, Preference

logger = logging.getLogger(__name__)

AIRPORTS = [
    Airport("MNL", "Manila Ninoy Aquino International Airport", True),
    Airport("CEB", "Mactan-Cebu International Airport", True),
    Airport("DVO", "Francisco Bangoy International Airport (Davao)", True),
    Airport("ILO", "Iloilo International Airport", True),
    Airport("BCD", "Bacolod-Silay International Airport", True),
    Airport("CRK", "Clark International Airport", True),
    Airport("KLO", "Kalibo International Airport", True),
    Airport("TAG", "Tagbilaran Airport", True),
    Airport("PPS", "Puerto Princesa International Airport", True),
    Airport("ZAM", "Zamboanga International Airport", True),
    Airport("CGY", "Cagayan de Oro Airport", True),
    Airport("GES", "General Santos International Airport", True),
    Airport("LGP", "Legazpi Airport", True),
    Airport("BXU", "Butuan Airport", True),
    Airport("DGT", "Sibulan Airport (Dumaguete)", True),
    Airport("CYP", "Calbayog Airport", True),
    Airport("CBO", "Awang Airport (Cotabato)", True),
    Airport("SJI", "San Jose Airport (Mindoro)", True),
    Airport("TAC", "Daniel Z. Romualdez Airport (Tacloban)", True),
    Airport("TUG", "Tuguegarao Airport", True),
]

COUNTRIES = [
    Country("JPN", "Japan"),
    Country("KOR", "South Korea"),
    Country("SGP", "Singapore"),
    Country("THA", "Thailand"),
    Country("VNM", "Vietnam"),
    Country("MYS", "Malaysia"),
    Country("HKG", "Hong Kong"),
    Country("TWN", "Taiwan"),
    Country("AUS", "Australia"),
    Country("USA", "United States"),
    Country("CAN", "Canada"),
    Country("GBR", "United Kingdom"),
    Country("FRA", "France"),
    Country("ITA", "Italy"),
    Country("ESP", "Spain"),
]

CURRENCIES = [
    Currency("PHP", "Philippine Peso"),
    Currency("USD", "US Dollar"),
    Currency("EUR", "Euro"),
    Currency("JPY", "Japanese Yen"),
    Currency("SGD", "Singapore Dollar"),
    Currency("KRW", "Korean Won"),
    Currency("THB", "Thai Baht"),
]

PREFERENCES = [
    Preference("landmarks", "Landmarks", "landmark"),
    Preference("food", "Food", "utensils"),
    Preference("shopping", "Shopping", "shopping-bag"),
    Preference("adventure", "Adventure", "hiking"),
    Preference("culture", "Culture", "theater-masks"),
    Preference("instagram", "Instagrammable Spots", "camera"),
    Preference("nature", "Nature", "leaf"),
    Preference("nightlife", "Nightlife", "moon"),
]

CITIES_BY_COUNTRY: Dict[str, list] = {
    "JPN": [
        ("TYO", "Tokyo"), ("OSA", "Osaka"), ("KYO", "Kyoto"), ("HIJ", "Hiroshima"),
        ("SPK", "Sapporo"), ("NGO", "Nagoya"), ("FUK", "Fukuoka"), ("KOB", "Kobe"),
        ("OKA", "Okinawa"), ("KIJ", "Niigata"),
    ],
    "KOR": [
        ("SEL", "Seoul"), ("PUS", "Busan"), ("ICN", "Incheon"), ("CJU", "Jeju"),
        ("TAE", "Daegu"), ("KWJ", "Gwangju"), ("YNY", "Yangyang"),
    ],
    "SGP": [("SIN", "Singapore")],
    "THA": [
        ("BKK", "Bangkok"), ("CNX", "Chiang Mai"), ("HKT", "Phuket"), ("KBV", "Krabi"),
        ("USM", "Koh Samui"), ("UTP", "Pattaya"),
    ],
    "VNM": [
        ("HAN", "Hanoi"), ("SGN", "Ho Chi Minh City"), ("DAD", "Da Nang"),
        ("HPH", "Haiphong"), ("NHA", "Nha Trang"), ("CXR", "Cam Ranh"),
    ],
    "HKG": [("HKG", "Hong Kong")],
    "TWN": [("TPE", "Taipei"), ("KHH", "Kaohsiung"), ("RMQ", "Taichung"), ("TNN", "Tainan")],
    "AUS": [
        ("SYD", "Sydney"), ("MEL", "Melbourne"), ("BNE", "Brisbane"), ("PER", "Perth"),
        ("ADL", "Adelaide"), ("CBR", "Canberra"), ("CNS", "Cairns"), ("OOL", "Gold Coast"),
    ],
    "USA": [
        ("NYC", "New York"), ("LAX", "Los Angeles"), ("CHI", "Chicago"), ("MIA", "Miami"),
        ("SFO", "San Francisco"), ("LAS", "Las Vegas"), ("HNL", "Honolulu"),
        ("SEA", "Seattle"), ("BOS", "Boston"), ("ATL", "Atlanta"),
    ],
}


def iter_cities():
    for country_code, entries in CITIES_BY_COUNTRY.items():
        for code, name in entries:
            yield City(code=code, name=name, country_code=country_code)


def seed_reference_data(repository) -> Dict[str, int]:
    """Upsert all reference content by code. Returns rows inserted per kind."""
    inserted = {}
    # countries before cities: cities reference countries.code
    inserted["countries"] = sum(repository.upsert_country(c) for c in COUNTRIES)
    inserted["airports"] = sum(repository.upsert_airport(a) for a in AIRPORTS)
    inserted["currencies"] = sum(repository.upsert_currency(c) for c in CURRENCIES)
    inserted["preferences"] = sum(repository.upsert_preference(p) for p in PREFERENCES)
    inserted["cities"] = sum(repository.upsert_city(c) for c in iter_cities())
    for kind, count in inserted.items():
        logger.info("Seeded %s: %d new", kind, count)
    return inserted
