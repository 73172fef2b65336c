# ABOUTME: Canned OpenLibrary API response fixtures for testing.
# ABOUTME: Provides realistic JSON dicts matching OL edition, work, and search shapes.

LONG_DESCRIPTION = (
    "In 1327, the Franciscan friar William of Baskerville arrives at a wealthy "
    "Benedictine abbey in northern Italy, where a series of mysterious deaths "
    "threatens a delicate theological debate."
)

WORK_DESCRIPTION = (
    "A murder mystery set in an Italian monastery in the year 1327, combining "
    "semiotics, biblical analysis, medieval studies and literary theory into a "
    "richly layered historical novel about books, knowledge and faith."
)

ISBN_RESPONSE = {
    "key": "/books/OL24364628M",
    "title": "The Name of the Rose",
    "authors": [{"key": "/authors/OL123A"}],
    "publishers": ["Harcourt"],
    "isbn_13": ["9780156001311"],
    "isbn_10": ["0156001314"],
    "number_of_pages": 536,
    "covers": [240727],
    "works": [{"key": "/works/OL456W"}],
}

ISBN_RESPONSE_WITH_DESCRIPTION = {
    **ISBN_RESPONSE,
    "description": {"type": "/type/text", "value": LONG_DESCRIPTION},
}

ISBN_RESPONSE_BARE = {
    "key": "/books/OL999M",
    "title": "Some Obscure Pamphlet",
    "works": [{"key": "/works/OL999W"}],
    "covers": [-1],
}

WORK_RESPONSE = {
    "key": "/works/OL456W",
    "title": "The Name of the Rose",
    "covers": [8231856, 240727],
    "description": {"type": "/type/text", "value": WORK_DESCRIPTION},
    "number_of_pages_median": 502,
}

WORK_RESPONSE_SHORT_DESCRIPTION = {
    "key": "/works/OL456W",
    "title": "The Name of the Rose",
    "description": "A monastery mystery.",
}

EDITION_RESPONSE = {
    "key": "/books/OL7353617M",
    "title": "The Name of the Rose",
    "number_of_pages": 612,
    "covers": [555111],
    "works": [{"key": "/works/OL456W"}],
}

SEARCH_RESPONSE = {
    "numFound": 2,
    "docs": [
        {
            "key": "/works/OL456W",
            "title": "The Name of the Rose",
            "author_name": ["Umberto Eco"],
            "isbn": ["9780156001311", "0156001314"],
            "cover_i": 240727,
            "cover_edition_key": "OL24364628M",
            "number_of_pages_median": 502,
        },
        {
            "key": "/works/OL457W",
            "title": "Foucault's Pendulum",
            "author_name": ["Umberto Eco"],
            "cover_i": 123,
        },
    ],
}

SEARCH_RESPONSE_EMPTY = {"numFound": 0, "docs": []}

SUBJECT_WORK = {
    "key": "/works/OL82563W",
    "title": "Harry Potter and the Philosopher's Stone",
    "authors": [{"key": "/authors/OL23919A", "name": "J. K. Rowling"}],
    "cover_id": 10521270,
    "cover_edition_key": "OL22856696M",
}
