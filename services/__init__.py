"""
Service layer

Pure computation only, no file access and no locking:
- RoomResolver: access code -> partition key
- DocumentService: field-by-field repair of raw documents
- RateLimitService: rate limit window arithmetic
- LogService: log entry creation, truncation and recency
"""
