"""Storefront - katalog, koszyk i checkout z symulowanym bankiem."""
