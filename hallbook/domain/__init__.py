"""Domain rules: time slots, booking state machine."""
