"""QuoteDesk — supplier quotation & RFQ workflow service and client."""
