from .matching import (
    Matcher,
    DEFAULT_MATCH_FIELDS,
    field_matcher,
    fuzzy_field_matcher,
    all_of,
    build_matcher
)
from .duplicates import (
    WindowPolicy,
    to_millis,
    is_duplicate_transaction,
    find_duplicate_groups,
    select_survivor_and_removals,
    filter_duplicate_transactions
)
from .store import TransactionStore, SqlTransactionStore, get_store
from .deduplicate import deduplicate_transactions, preview_duplicates
from .validation import validate_transaction
