"""PsiPro - scheduling and billing backend for a clinical practice."""

__version__ = "0.1.0"
