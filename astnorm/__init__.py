"""astnorm — normalize JSON-serialized Fluent ASTs into diff-friendly fixtures."""

__version__ = "0.1.0"
