"""Domain layer - hotplug entities, value objects, errors and services."""
