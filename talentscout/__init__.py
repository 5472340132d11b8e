"""TalentScout: candidate sourcing over LinkedIn-profile data providers."""

__version__ = "1.0.0"
