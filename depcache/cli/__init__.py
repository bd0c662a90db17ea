"""depcache command line interface"""
