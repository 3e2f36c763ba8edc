"""Core building blocks: exceptions, value objects and shared stores."""
