"""Tests for talentscout.normalize: seniority, experience and location inference."""

from datetime import datetime

import pytest
from freezegun import freeze_time

from talentscout.normalize import (
    assemble_location,
    estimate_experience_years,
    format_year_month,
    infer_seniority_from_title,
    profile_slug,
)


class TestInferSeniority:
    @pytest.mark.parametrize(
        ("title", "expected"),
        [
            ("CTO", "c-level"),
            ("Chief Data Officer", "c-level"),
            ("Co-Founder & CEO", "c-level"),
            ("Founder", "c-level"),
            ("VP of Engineering", "vp"),
            ("Vice President, Sales", "vp"),
            ("Director of Product", "director"),
            ("Engineering Manager", "manager"),
            ("Head of Data", "manager"),
            ("Tech Lead", "lead"),
            ("Principal Engineer", "lead"),
            ("Staff Software Engineer", "lead"),
            ("Solutions Architect", "lead"),
            ("Senior Data Engineer", "senior"),
            ("Junior Developer", "junior"),
            ("Jr. Developer", "junior"),
            ("Associate Consultant", "junior"),
            ("Software Engineering Intern", "entry"),
            ("Graduate Analyst", "entry"),
            ("Data Engineer", "mid"),
        ],
    )
    def test_patterns(self, title: str, expected: str) -> None:
        assert infer_seniority_from_title(title) == expected

    def test_director_outranks_senior(self) -> None:
        assert infer_seniority_from_title("Senior Director of Engineering") == "director"

    def test_case_insensitive(self) -> None:
        assert infer_seniority_from_title("SENIOR ENGINEER") == "senior"

    def test_no_substring_matches(self) -> None:
        # "coordinator" contains "coo", "director" contains "cto"
        assert infer_seniority_from_title("Production Coordinator") == "mid"
        assert infer_seniority_from_title("Art Director") == "director"

    def test_missing_text_leaves_unset(self) -> None:
        assert infer_seniority_from_title(None) is None
        assert infer_seniority_from_title("") is None
        assert infer_seniority_from_title("   ") is None


class TestEstimateExperienceYears:
    def test_open_ended_year_only_start(self) -> None:
        # (2021 - 2020) * 12 + (7 - 1) = 18 months -> 1.5 -> rounds up
        now = datetime(2021, 7, 15)
        assert estimate_experience_years([({"year": 2020}, None)], now=now) == 2

    def test_open_ended_defaults_to_january(self) -> None:
        # (2024 - 2020) * 12 + (6 - 1) = 53 months -> 4.4
        now = datetime(2024, 6, 10)
        assert estimate_experience_years([({"year": 2020}, None)], now=now) == 4

    def test_end_month_defaults_to_december(self) -> None:
        # 2018-01 .. 2019-12 = 23 months
        assert estimate_experience_years([({"year": 2018, "month": 1}, {"year": 2019})]) == 2

    def test_sums_periods(self) -> None:
        periods = [
            ({"year": 2015, "month": 1}, {"year": 2019, "month": 2}),  # 49
            ({"year": 2019, "month": 3}, {"year": 2025, "month": 3}),  # 72
        ]
        assert estimate_experience_years(periods) == 10

    def test_negative_interval_counts_as_zero(self) -> None:
        periods = [
            ({"year": 2020, "month": 6}, {"year": 2020, "month": 1}),
            ({"year": 2010, "month": 1}, {"year": 2012, "month": 1}),
        ]
        assert estimate_experience_years(periods) == 2

    def test_skips_periods_without_start_year(self) -> None:
        periods = [
            (None, None),
            ({"month": 3}, {"year": 2020}),
            ({"year": 2020, "month": 1}, {"year": 2022, "month": 1}),
        ]
        assert estimate_experience_years(periods) == 2

    def test_no_usable_start_is_zero(self) -> None:
        assert estimate_experience_years([(None, {"year": 2020})]) == 0

    def test_empty_is_none(self) -> None:
        assert estimate_experience_years([]) is None

    @freeze_time("2025-03-15")
    def test_defaults_to_current_time(self) -> None:
        assert estimate_experience_years([({"year": 2019, "month": 3}, None)]) == 6


class TestFormatYearMonth:
    def test_full(self) -> None:
        assert format_year_month({"year": 2019, "month": 3, "day": 1}) == "2019-03"

    def test_missing_month(self) -> None:
        assert format_year_month({"year": 2011}) == "2011-01"

    def test_missing(self) -> None:
        assert format_year_month(None) is None
        assert format_year_month({"month": 4}) is None


class TestAssembleLocation:
    def test_all_parts(self) -> None:
        assert assemble_location("Bengaluru", "Karnataka", "India") == "Bengaluru, Karnataka, India"

    def test_skips_empty(self) -> None:
        assert assemble_location("Berlin", None, "Germany") == "Berlin, Germany"
        assert assemble_location(None, "", "Germany") == "Germany"

    def test_all_missing(self) -> None:
        assert assemble_location(None, None, None) is None
        assert assemble_location("", " ", None) is None


class TestProfileSlug:
    def test_url(self) -> None:
        assert profile_slug("https://www.linkedin.com/in/jane-doe/") == "jane-doe"

    def test_url_with_query(self) -> None:
        assert profile_slug("https://www.linkedin.com/in/jane-doe?trk=x") == "jane-doe"

    def test_bare_identifier(self) -> None:
        assert profile_slug("jane-doe") == "jane-doe"

    def test_url_with_fragment(self) -> None:
        assert profile_slug("https://www.linkedin.com/in/jane-doe#about") == "jane-doe"

    def test_trailing_section_after_slug(self) -> None:
        assert profile_slug("https://www.linkedin.com/in/jane-doe/details/skills/") == "jane-doe"

    def test_talent_profile_url(self) -> None:
        assert profile_slug("https://www.linkedin.com/talent/profile/AEMAAB123?project=9") == "AEMAAB123"

    def test_schemeless_in_url(self) -> None:
        assert profile_slug("linkedin.com/in/jane-doe") == "jane-doe"
