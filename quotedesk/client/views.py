"""
client/views.py — List shaping for the supplier quotation dashboard.

Pure functions over QuotationOut lists: search, type filter, expiry
relabel, and the tab partition. Nothing here touches the network or the
cache; relabeling returns copies so cached data is never rewritten.

Business Rules:
- Search is a case-insensitive substring match on title, buyer name and id;
  the query is used as typed, surrounding spaces included
- Open quotations (pending/sent) past validUntil display as "expired"
- Tabs: active (pending+sent), accepted, rejected, expired; any unknown
  status lands in no tab but still counts toward "all"
"""

from datetime import datetime

from ..utils.expiry import effective_status as _effective_status

TAB_STATUSES = {
    "active": ("pending", "sent"),
    "accepted": ("accepted",),
    "rejected": ("rejected",),
    "expired": ("expired",),
}


def effective_status(quotation, now: datetime | None = None) -> str:
    return _effective_status(quotation.status, quotation.valid_until, now)


def search_quotations(quotations: list, query: str | None) -> list:
    needle = (query or "").lower()
    if not needle:
        return list(quotations)
    return [
        q for q in quotations
        if needle in (q.title or "").lower()
        or needle in (q.buyer_name or "").lower()
        or needle in (q.id or "").lower()
    ]


def filter_by_type(quotations: list, type_filter: str = "all") -> list:
    if not type_filter or type_filter == "all":
        return list(quotations)
    return [q for q in quotations if q.type == type_filter]


def relabel_expired(quotations: list, now: datetime | None = None) -> list:
    out = []
    for q in quotations:
        status = effective_status(q, now)
        out.append(q if status == q.status else q.model_copy(update={"status": status}))
    return out


def visible_quotations(
    quotations: list,
    query: str | None = None,
    type_filter: str = "all",
    now: datetime | None = None,
) -> list:
    """search → type filter → expiry relabel, in the order the dashboard applies them."""
    return relabel_expired(filter_by_type(search_quotations(quotations, query), type_filter), now)


def partition(quotations: list) -> dict[str, list]:
    buckets = {tab: [] for tab in TAB_STATUSES}
    for q in quotations:
        for tab, statuses in TAB_STATUSES.items():
            if q.status in statuses:
                buckets[tab].append(q)
                break
    return buckets


def tab_counts(quotations: list) -> dict[str, int]:
    buckets = partition(quotations)
    return {
        "all": len(quotations),
        "pending": len(buckets["active"]),
        "accepted": len(buckets["accepted"]),
        "rejected": len(buckets["rejected"]),
        "expired": len(buckets["expired"]),
    }
