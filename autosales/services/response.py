def list_envelope(items, limit, offset) -> dict:
    return {"items": items, "count": len(items), "limit": limit, "offset": offset}


class ListResponseMixin:
    """Wrap a service's ``list`` result in the paginated envelope.

    ``limit`` and ``offset`` are the last two positional arguments of every
    ``list`` signature, so they are read back from ``args`` when not passed
    by keyword. Other paginated reads (searches, lookups by parent) go
    through ``paginated_response`` with the same trailing arguments.
    """

    @classmethod
    def list_response(cls, db, *args, **kwargs):
        return cls.paginated_response(cls.list, db, *args, **kwargs)

    @staticmethod
    def paginated_response(read, db, *args, **kwargs):
        items = read(db, *args, **kwargs)
        limit = kwargs.get("limit")
        offset = kwargs.get("offset")
        if limit is None and len(args) >= 2:
            limit = args[-2]
        if offset is None and len(args) >= 1:
            offset = args[-1]
        return list_envelope(items, limit, offset)
