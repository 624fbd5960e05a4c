"""Load a starter set of universities, replacing any that exist.

Usage:
    python -m backend.seed
"""
import json
import logging

from backend.database import SessionLocal, init_schema
from backend.models.university import University

logger = logging.getLogger(__name__)

UNIVERSITIES = [
    {
        'name': 'Harvard University',
        'country': 'United States',
        'state': 'Massachusetts',
        'city': 'Cambridge',
        'us_news_ranking': 2,
        'acceptance_rate': 3.4,
        'application_system': 'Common App',
        'tuition_in_state': 54269,
        'tuition_out_state': 54269,
        'application_fee': 75,
        'deadlines': {'early_action': '2024-11-01', 'regular_decision': '2025-01-01'},
    },
    {
        'name': 'Stanford University',
        'country': 'United States',
        'state': 'California',
        'city': 'Stanford',
        'us_news_ranking': 3,
        'acceptance_rate': 3.9,
        'application_system': 'Common App',
        'tuition_in_state': 56169,
        'tuition_out_state': 56169,
        'application_fee': 90,
        'deadlines': {'early_action': '2024-11-01', 'regular_decision': '2025-01-02'},
    },
    {
        'name': 'Massachusetts Institute of Technology',
        'country': 'United States',
        'state': 'Massachusetts',
        'city': 'Cambridge',
        'us_news_ranking': 2,
        'acceptance_rate': 4.1,
        'application_system': 'Direct',
        'tuition_in_state': 53790,
        'tuition_out_state': 53790,
        'application_fee': 75,
        'deadlines': {'early_action': '2024-11-01', 'regular_decision': '2025-01-01'},
    },
    {
        'name': 'University of California, Berkeley',
        'country': 'United States',
        'state': 'California',
        'city': 'Berkeley',
        'us_news_ranking': 20,
        'acceptance_rate': 14.5,
        'application_system': 'UC Application',
        'tuition_in_state': 14226,
        'tuition_out_state': 44008,
        'application_fee': 70,
        'deadlines': {'regular_decision': '2024-11-30'},
    },
    {
        'name': 'University of California, Los Angeles',
        'country': 'United States',
        'state': 'California',
        'city': 'Los Angeles',
        'us_news_ranking': 20,
        'acceptance_rate': 10.8,
        'application_system': 'UC Application',
        'tuition_in_state': 13804,
        'tuition_out_state': 43473,
        'application_fee': 70,
        'deadlines': {'regular_decision': '2024-11-30'},
    },
    {
        'name': 'University of Toronto',
        'country': 'Canada',
        'state': 'Ontario',
        'city': 'Toronto',
        'us_news_ranking': 18,
        'acceptance_rate': 43.0,
        'application_system': 'OUAC',
        'application_fee': 180,
        'deadlines': {'regular_decision': '2025-01-15'},
    },
    {
        'name': 'University of Oxford',
        'country': 'United Kingdom',
        'city': 'Oxford',
        'us_news_ranking': 5,
        'acceptance_rate': 17.5,
        'application_system': 'UCAS',
        'application_fee': 28,
        'deadlines': {'regular_decision': '2024-10-15'},
    },
]


def seed_universities(db) -> int:
    db.query(University).delete()
    for entry in UNIVERSITIES:
        data = dict(entry)
        data['deadlines'] = json.dumps(data['deadlines'])
        db.add(University(**data))
    db.commit()
    return len(UNIVERSITIES)


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    init_schema()
    db = SessionLocal()
    try:
        count = seed_universities(db)
    finally:
        db.close()
    logger.info('Seeded %d universities', count)


if __name__ == '__main__':
    main()
