# -*- coding: utf-8 -*-
"""Health record schema, import/export, store and timeline."""
