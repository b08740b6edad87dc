from prometheus_client import Counter, Histogram

REQS = Counter("txproof_requests_total", "Total requests", ["path","method","status"])
LAT = Histogram("txproof_request_latency_seconds", "Latency", ["path","method"])
ROOTS = Counter("txproof_roots_published_total", "Block roots published")
PROOFS = Counter("txproof_proofs_total", "Proofs generated", ["status"])
VERIFICATIONS = Counter("txproof_verifications_total", "Standalone proof verifications", ["status"])
