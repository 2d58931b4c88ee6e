# Namespace for table pipeline steps
from .search_rows import SearchRows  # noqa: F401
from .filter_rows import FilterRows  # noqa: F401
from .sort_rows import SortRows  # noqa: F401
from .paginate_rows import PaginateRows, total_pages  # noqa: F401
