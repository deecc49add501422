"""Transactional page writers"""
