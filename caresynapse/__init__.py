# -*- coding: utf-8 -*-
"""Health record entry and AI summarization backend."""
