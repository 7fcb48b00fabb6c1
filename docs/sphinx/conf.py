# Copyright 2026 LeanHeaders Contributors
# SPDX-License-Identifier: Apache-2.0

"""Sphinx configuration for LeanHeaders documentation."""

project = "LeanHeaders"
author = "LeanHeaders Contributors"
release = "0.1.0"

extensions: list[str] = ["sphinx.ext.autodoc"]

html_theme = "alabaster"
