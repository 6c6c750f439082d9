"""Resource model, validation and in-memory storage for source-to-image build resources."""

__version__ = "0.1.0"

__all__ = [
    "builder_types",
    "listers",
    "meta",
    "policies",
    "reference",
    "run_types",
    "store",
    "template_types",
    "validation",
]