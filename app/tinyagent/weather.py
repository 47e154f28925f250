# app/tinyagent/weather.py
"""
Demo agent: two chained tools (geocode -> weather lookup) backed by mock
data, plus an optional structured WeatherReport output.
"""
from __future__ import annotations

import math
from typing import Any, Dict, Optional

from .core import Agent, RunContext
from .schemas import ProviderConfig

LOCATIONS: Dict[str, Dict[str, float]] = {
    "San Francisco": {"lat": 37.7749, "lng": -122.4194},
    "New York": {"lat": 40.7128, "lng": -74.0060},
    "London": {"lat": 51.5074, "lng": -0.1278},
    "Tokyo": {"lat": 35.6762, "lng": 139.6503},
    "Paris": {"lat": 48.8566, "lng": 2.3522},
    "Sydney": {"lat": -33.8688, "lng": 151.2093},
    "Miami": {"lat": 25.7617, "lng": -80.1918},
    "Seattle": {"lat": 47.6062, "lng": -122.3321},
}

CONDITIONS = ["Sunny", "Partly Cloudy", "Cloudy", "Rainy", "Foggy"]

SYSTEM_PROMPT = """You are a helpful weather assistant.

To answer weather queries, you MUST:
1. ALWAYS call get_lat_lng first to convert the location to coordinates
2. ALWAYS call get_weather with those coordinates to get weather data
3. Then provide a friendly response with the weather information

IMPORTANT: You must call BOTH tools for every weather query. Do not skip the get_weather call."""

WEATHER_REPORT_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "location": {"type": "string", "description": "The location name"},
        "temperature": {"type": "number", "description": "Temperature in Fahrenheit"},
        "condition": {"type": "string", "description": "Weather condition (e.g., Sunny, Rainy)"},
        "summary": {"type": "string", "description": "A brief weather summary"},
    },
    "required": ["location", "temperature", "condition", "summary"],
}


def mock_weather(lat: float, lng: float) -> Dict[str, Any]:
    """Deterministic fake weather: warmer towards the equator."""
    base = 90 - abs(lat) * 0.8
    temp = math.floor(base + (lng % 10) - 5)
    return {
        "temperature": temp,
        "condition": CONDITIONS[int(temp % 5)],
        "humidity": round(50 + (lng % 30), 1),
        "wind_speed": round(5 + (lat % 15), 1),
    }


def get_lat_lng(ctx: RunContext, args: Dict[str, Any]) -> Dict[str, Any]:
    location = str(args.get("location") or "").strip()
    if location in LOCATIONS:
        c = LOCATIONS[location]
        return {"location": location, "latitude": c["lat"], "longitude": c["lng"]}

    needle = location.lower()
    for city, c in LOCATIONS.items():
        hay = city.lower()
        if needle and (needle in hay or hay in needle):
            return {"location": city, "latitude": c["lat"], "longitude": c["lng"]}

    return {
        "error": f"Location not found: {location}",
        "available_locations": list(LOCATIONS),
    }


def get_weather(ctx: RunContext, args: Dict[str, Any]) -> Dict[str, Any]:
    lat = float(args["latitude"])
    lng = float(args["longitude"])
    if not (-90 <= lat <= 90 and -180 <= lng <= 180):
        return {"error": "Invalid coordinates. Latitude must be -90 to 90, longitude -180 to 180"}

    w = mock_weather(lat, lng)
    return {
        "latitude": lat,
        "longitude": lng,
        "temperature_fahrenheit": w["temperature"],
        "condition": w["condition"],
        "humidity_percent": w["humidity"],
        "wind_speed_mph": w["wind_speed"],
    }


WEATHER_TOOLS: Dict[str, Dict[str, Any]] = {
    "get_lat_lng": {
        "description": "Convert a location name or description into latitude and longitude coordinates",
        "parameters": {
            "type": "object",
            "properties": {
                "location": {
                    "type": "string",
                    "description": "The location name, city, or address to geocode",
                },
            },
            "required": ["location"],
        },
        "handler": get_lat_lng,
    },
    "get_weather": {
        "description": "Get current weather information for specific latitude and longitude coordinates",
        "parameters": {
            "type": "object",
            "properties": {
                "latitude": {"type": "number", "description": "Latitude coordinate (-90 to 90)"},
                "longitude": {"type": "number", "description": "Longitude coordinate (-180 to 180)"},
            },
            "required": ["latitude", "longitude"],
        },
        "handler": get_weather,
    },
}


def create_weather_agent(provider: Optional[ProviderConfig] = None, *,
                         structured: bool = False, **overrides: Any) -> Agent:
    options: Dict[str, Any] = {
        "system_prompt": SYSTEM_PROMPT,
        "tools": WEATHER_TOOLS,
        "temperature": 0.7,
    }
    if provider is not None:
        options.update(model=provider.model, base_url=provider.base_url,
                       api_key=provider.api_key)
    if structured:
        options["output_schema"] = WEATHER_REPORT_SCHEMA
    options.update(overrides)
    return Agent(**options)
