# -*- coding: utf-8 -*-
"""Summarizer prompt, response validation and client."""
