"""Services talking to the outside world: the config file and Kodi itself"""
