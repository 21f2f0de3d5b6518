"""Status vocabularies shared by the service and the client."""

QUOTATION_TYPES = ("rfq", "inquiry")

# pending | sent | accepted | rejected | expired
QUOTATION_STATUSES = ("pending", "sent", "accepted", "rejected", "expired")
OPEN_QUOTATION_STATUSES = ("pending", "sent")
EDITABLE_QUOTATION_STATUSES = ("pending", "sent", "expired")
DECIDED_QUOTATION_STATUSES = ("accepted", "rejected")

# open | closed | expired
RFQ_STATUSES = ("open", "closed", "expired")
