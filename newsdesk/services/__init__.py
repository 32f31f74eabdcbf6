# Services package.
#
# Each module exposes a focused set of async functions that encapsulate
# business logic and database access for a single domain aggregate:
#
#   user_service     : registration, profile updates, soft delete, login
#   category_service : CRUD with slug uniqueness and an in-use delete guard
#   news_service     : CRUD, view counting, public listings and search
#   comment_service  : creation, moderation and enriched listings
#
# All service functions accept an AsyncSession as their first argument
# so that the router layer controls the transaction boundary via the
# ``get_db`` dependency. Domain failures are raised as the exceptions in
# ``newsdesk.exceptions``; read operations that find nothing return None
# or an empty list instead.
