"""
Configuration Helper - access the HORARIOS settings dict
"""

from django.conf import settings

_DEFAULTS = {
    'SUBJECT_MATCH_ORDER': ['exact', 'partial', 'fuzzy'],
    'FUZZY_MATCH_THRESHOLD': 0.8,
    'CLASSROOM_STRATEGY': 'round_robin',
    'COALESCE_ITEMS': True,
    'DEFAULT_DEGREE_PROGRAM': 'General',
}


def _horarios(key):
    return getattr(settings, 'HORARIOS', {}).get(key, _DEFAULTS[key])


class Config:
    """Centralized config access"""

    class Generation:
        """Schedule and group generation tuning"""

        @staticmethod
        def get_subject_match_order():
            """Order of subject matching strategies (exact, partial, fuzzy)"""
            return list(_horarios('SUBJECT_MATCH_ORDER'))

        @staticmethod
        def get_fuzzy_match_threshold():
            return float(_horarios('FUZZY_MATCH_THRESHOLD'))

        @staticmethod
        def get_classroom_strategy():
            """Name of the classroom assignment strategy"""
            return _horarios('CLASSROOM_STRATEGY')

        @staticmethod
        def get_coalesce_items():
            """Merge contiguous slots of a group into one schedule item"""
            return bool(_horarios('COALESCE_ITEMS'))

        @staticmethod
        def get_default_degree_program():
            return _horarios('DEFAULT_DEGREE_PROGRAM')
