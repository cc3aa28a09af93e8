"""OTLP log export: severity mapping, record/envelope building, delivery."""
