"""Registry -- index and source-of-truth layer for city records.

The registry provides:
- Codec: city records to and from the bytes stored under ``city_<id>``
- Index: the ordered list of known ids stored under ``city_keys``
- Store: tolerant listing, lookup, and the record-then-index create
- Scoring and projection: derived satisfaction, stats, ordering, pages
"""
