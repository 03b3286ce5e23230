"""
Fixed sample records served when no database is configured (sample mode).

Each call builds new objects, so callers can never mutate the shared set.
"""

from __future__ import annotations

from clients.schemas import Client
from tutors.schemas import Tutor


def sample_tutors() -> list[Tutor]:
    return [
        Tutor(
            id=1,
            name="John Smith",
            email="john.smith@email.com",
            subjects=["Mathematics", "Physics"],
            pay=50.0,
            rating=4.8,
            bio="Experienced math and physics tutor with 5+ years of experience",
        ),
        Tutor(
            id=2,
            name="Sarah Johnson",
            email="sarah.johnson@email.com",
            subjects=["English", "Literature", "Writing"],
            pay=45.0,
            rating=4.9,
            bio="English literature expert specializing in creative writing and essay composition",
        ),
    ]


def sample_clients() -> list[Client]:
    return [
        Client(
            id=1,
            name="Mike Davis",
            email="mike.davis@email.com",
            subjects=["Mathematics"],
            budget=60.0,
            description="Looking for advanced calculus help",
        ),
        Client(
            id=2,
            name="Emily Wilson",
            email="emily.wilson@email.com",
            subjects=["English", "Writing"],
            budget=50.0,
            description="Need help with essay writing and literature analysis",
        ),
    ]
