# Services package.
#
# Each module exposes a focused set of async functions that encapsulate
# store access for a single collection:
#
#   article_service  — CRUD, listings and the likedBy toggle for Article
#   comment_service  — append-only comment creation and lookup
#
# All service functions accept an AsyncSession as their first argument
# so that the router layer controls the transaction boundary via the
# ``get_db`` dependency.
