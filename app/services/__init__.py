"""Business logic: credential store, costing, ownership, validation and image storage."""
