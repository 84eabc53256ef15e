from paperbot.services.fuzzy_search import (
    levenshtein_distance,
    match,
    match_with_transliteration,
    search_clients,
)
from paperbot.services.state_machine import (
    InvalidTransitionError,
    SessionState,
    begin_search,
    can_transition,
    present_choices,
    reset,
    resolve,
    transition,
)
from paperbot.services.transliteration import transliterate
