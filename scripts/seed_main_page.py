#!/usr/bin/env python3
"""
Script to create the main landing page (slug '/').

Every subpage is cloned from the main page, so the site needs it before
anything can be added in the admin panel. Running the script again leaves
an existing main page untouched.

Usage:
    python scripts/seed_main_page.py
"""

import sys
import os

# Add the parent directory to the path so we can import the app
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app import create_app, db
from app.models.page import Page, default_page_data, page_data_to_db_row

DEFAULT_CITIES = [
    'Chojnice', 'Gdańsk', 'Sopot', 'Gdynia', 'Bytów', 'Kartuzy',
    'Kościerzyna', 'Słupsk', 'Lębork', 'Ustka', 'Malbork', 'Tczew',
    'Wejherowo', 'Puck', 'Hel', 'Starogard Gdański',
]


def build_main_page():
    data = default_page_data('Strona główna', '/')
    data['welcomeSection'] = {
        'welcomeText': 'Fotobudka na Twoje wydarzenie',
        'subtitle': 'Wesela, urodziny, eventy firmowe',
    }
    data['stats'] = {'clientsCount': '500+', 'yearsOnMarket': '5 lat', 'smilesCount': '∞'}
    data['locations'] = {'cities': list(DEFAULT_CITIES)}
    return data


def main():
    app = create_app()

    with app.app_context():
        existing = Page.query.filter_by(slug='/').first()
        if existing:
            print(f"Main page already exists (id {existing.id})")
            return

        row = page_data_to_db_row(build_main_page())
        row.pop('id')
        page = Page(**row)
        db.session.add(page)
        db.session.commit()
        print(f"Main page created (id {page.id})")


if __name__ == '__main__':
    main()
