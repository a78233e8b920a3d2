import copy

from app.models.page import page_data_to_db_row
from app.utils.page_store import StorageError, WRITABLE_COLUMNS

ADMIN_USERNAME = 'admin'
ADMIN_PASSWORD = 'booth-secret-123'


def sample_page_data(page_id='main-page', name='Strona główna', slug='/'):
    return {
        'id': page_id,
        'name': name,
        'slug': slug,
        'seo': {'title': 'Fotobudka Chojnice', 'description': 'Fotobudka na wesela'},
        'navigation': {
            'facebookUrl': 'https://facebook.com/ogevents',
            'instagramUrl': 'https://instagram.com/ogevents',
        },
        'videos': [
            {'src': '/assets/main/videos/intro.webm', 'alt': 'Intro', 'startTime': 3},
            {'src': '/assets/main/videos/party.webm', 'alt': 'Party'},
        ],
        'welcomeSection': {'welcomeText': 'Witamy!', 'subtitle': 'Fotobudka na kazda okazje'},
        'stats': {'clientsCount': '500+', 'yearsOnMarket': '5 lat', 'smilesCount': '∞'},
        'gallery': {'images': [{'src': '/a.webp', 'alt': 'A'}, {'src': '/b.webp', 'alt': 'B'}]},
        'locations': {'cities': ['Chojnice', 'Gdansk', 'Sopot']},
        'footer': {
            'facebookUrl': 'https://facebook.com/ogevents',
            'facebookText': 'OG Events',
            'instagramUrl': 'https://instagram.com/ogevents',
            'instagramText': '@ogevents',
            'phoneNumber': '+48 600 100 200',
        },
    }


def sample_row(page_id='main-page', name='Strona główna', slug='/', created_at=0):
    row = page_data_to_db_row(sample_page_data(page_id, name, slug))
    row['created_at'] = created_at
    return row


class FakeClock:
    """Manually advanced clock, in seconds."""

    def __init__(self, start=1000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class FakePageStore:
    """In-memory stand-in for SqlPageStore that counts reads and can be made to fail."""

    def __init__(self, rows=None):
        self.rows = [copy.deepcopy(row) for row in rows or []]
        self.select_calls = 0
        self.fail = False
        self._next_created = max([row.get('created_at', 0) for row in self.rows] or [0]) + 1

    def _check(self):
        if self.fail:
            raise StorageError('database unavailable')

    def select_all(self):
        self.select_calls += 1
        self._check()
        rows = sorted(self.rows, key=lambda row: (not row['is_main'], row['created_at']))
        return copy.deepcopy(rows)

    def update(self, page_id, fields):
        self._check()
        for row in self.rows:
            if row['id'] == page_id:
                for key in WRITABLE_COLUMNS:
                    if key in fields:
                        row[key] = copy.deepcopy(fields[key])
                row['is_main'] = row['slug'] == '/'
                return 1
        return 0

    def insert(self, fields):
        self._check()
        row = copy.deepcopy(fields)
        row['created_at'] = self._next_created
        self._next_created += 1
        self.rows.append(row)
        return copy.deepcopy(row)

    def delete(self, page_id):
        self._check()
        for index, row in enumerate(self.rows):
            if row['id'] == page_id and not row['is_main']:
                del self.rows[index]
                return 1
        return 0


class FakeIdentity:
    """Identity provider whose session changes are triggered by the test."""

    def __init__(self, session=None):
        self.session = session
        self.subscribers = []

    def get_current_session(self):
        return self.session

    def on_session_change(self, callback):
        self.subscribers.append(callback)
        return lambda: self.subscribers.remove(callback)

    def emit(self, session):
        self.session = session
        for callback in list(self.subscribers):
            callback(session)
