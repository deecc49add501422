"""CouchDB page fetcher"""
