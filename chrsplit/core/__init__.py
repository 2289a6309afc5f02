"""Core of chrsplit: field extraction and the streaming router.

The router reads one JSONL file line by line, asks the extractor for the
routing key of each record, and writes the raw line to the output that
belongs to that key.  Records without a usable key go to the sentinel
output, so no record is ever dropped.
"""
