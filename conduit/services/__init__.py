# Services package.
#
# Each module exposes one service class encapsulating the business rules
# of a single domain aggregate:
#
#   user_service     registration, credentials, follow graph
#   profile_service  public profile views relative to a viewer
#   tag_service      tag listing (cached) and find-or-create
#   article_service  listing, feed, CRUD, favorites + view aggregation
#   comment_service  comments with author-only, slug-checked deletion
#
# Services are built per request by the providers in ``conduit.dependencies``
# and receive repositories, never a session; the ``get_db`` dependency owns
# the transaction boundary.
