from __future__ import annotations

from typing import Any, Dict, List

from models.raw_profile import RawProfile
from sources.base import ProfileSource, to_raw_profile
from sources.registry import register


SAMPLE_PROFILES: List[Dict[str, Any]] = [
    {
        "linkedin_id": "johndoe",
        "full_name": "John Doe",
        "headline": "Senior Software Engineer at Tech Corp",
        "location": "San Francisco, CA",
        "summary": "Experienced software engineer with 10+ years in full-stack development.",
        "experience": [
            {
                "company": "Tech Corp",
                "title": "Senior Software Engineer",
                "start_date": "2020-01",
                "description": "Leading development of cloud-native applications",
                "location": "San Francisco, CA",
            },
        ],
        "education": [
            {
                "school": "Stanford University",
                "degree": "BS",
                "field_of_study": "Computer Science",
                "start_year": 2008,
                "end_year": 2012,
            },
        ],
        "skills": ["JavaScript", "TypeScript", "React", "Node.js"],
        "connections_count": 1500,
        "profile_url": "https://linkedin.com/in/johndoe",
        "profile_image_url": "https://images.pexels.com/photos/220453/pexels-photo-220453.jpeg",
    },
    {
        "linkedin_id": "janesmith",
        "full_name": "Jane Smith",
        "headline": "Product Manager | AI & Machine Learning",
        "location": "New York, NY",
        "summary": "Passionate about building products that make a difference.",
        "experience": [
            {
                "company": "AI Innovations",
                "title": "Product Manager",
                "start_date": "2019-06",
                "location": "New York, NY",
            },
        ],
        "education": [
            {
                "school": "MIT",
                "degree": "MBA",
                "start_year": 2015,
                "end_year": 2017,
            },
        ],
        "skills": ["Product Management", "AI", "Machine Learning", "Strategy"],
        "connections_count": 2300,
        "profile_url": "https://linkedin.com/in/janesmith",
        "profile_image_url": "https://images.pexels.com/photos/774909/pexels-photo-774909.jpeg",
    },
]


class SampleProfilesSource(ProfileSource):
    """Fixed demo profiles; re-running them yields unchanged outcomes."""

    source_name = "sample"
    import_type = "json"

    def load(self) -> List[RawProfile]:
        return [to_raw_profile(p) for p in SAMPLE_PROFILES]


def _register():
    register(SampleProfilesSource.source_name, SampleProfilesSource)


_register()
