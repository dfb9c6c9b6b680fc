"""
Spy Locations - Built-in location catalog.

Every location carries at least max_players - 1 roles so each non-spy
seat gets a distinct role.
"""

from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class SpyLocation:
    """A secret location and the roles available there."""
    name: str
    category: str
    roles: tuple[str, ...]


LOCATIONS: tuple[SpyLocation, ...] = (
    SpyLocation(
        name="Airport",
        category="Travel",
        roles=(
            "Pilot", "Flight Attendant", "Security Guard", "Passenger",
            "Customs Officer", "Baggage Handler", "Check-in Agent",
            "Air Traffic Controller", "Duty-Free Clerk", "Airport Manager",
        ),
    ),
    SpyLocation(
        name="Train Station",
        category="Travel",
        roles=(
            "Conductor", "Passenger", "Ticket Inspector", "Station Master",
            "Security Guard", "Cafe Worker", "Porter", "Platform Attendant",
            "Cleaner", "Information Desk Agent",
        ),
    ),
    SpyLocation(
        name="Hospital",
        category="Public",
        roles=(
            "Doctor", "Nurse", "Patient", "Surgeon", "Paramedic",
            "Receptionist", "Pharmacist", "Lab Technician", "Security Guard",
            "Janitor",
        ),
    ),
    SpyLocation(
        name="School",
        category="Public",
        roles=(
            "Teacher", "Student", "Principal", "Coach", "Counselor",
            "Librarian", "Cafeteria Worker", "Bus Driver", "Security Guard",
            "Janitor",
        ),
    ),
    SpyLocation(
        name="Restaurant",
        category="Workplace",
        roles=(
            "Chef", "Waiter", "Host", "Customer", "Bartender", "Manager",
            "Dishwasher", "Sous Chef", "Food Critic", "Delivery Driver",
        ),
    ),
    SpyLocation(
        name="Office",
        category="Workplace",
        roles=(
            "Manager", "Employee", "Intern", "Receptionist", "IT Specialist",
            "HR Specialist", "Accountant", "Team Lead", "Security Guard",
            "Janitor",
        ),
    ),
    SpyLocation(
        name="Beach",
        category="Recreation",
        roles=(
            "Lifeguard", "Surfer", "Tourist", "Ice Cream Vendor",
            "Photographer", "Sunbather", "Volleyball Player", "Swimmer",
            "Beach Cleaner", "Kite Flyer",
        ),
    ),
    SpyLocation(
        name="Movie Theater",
        category="Entertainment",
        roles=(
            "Projectionist", "Ticket Seller", "Usher", "Moviegoer",
            "Snack Bar Attendant", "Manager", "Critic", "Security Guard",
            "Cleaner", "Film Director",
        ),
    ),
)

CATEGORIES: tuple[str, ...] = tuple(sorted({loc.category for loc in LOCATIONS}))


def get_location(name: str) -> SpyLocation | None:
    """Look up a location by name."""
    for location in LOCATIONS:
        if location.name == name:
            return location
    return None
