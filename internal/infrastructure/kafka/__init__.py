"""
Kafka infrastructure package.
"""

from .producer import KafkaProducer

__all__ = ["KafkaProducer"]
