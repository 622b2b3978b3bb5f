pytest_plugins = ["stubroute.pytest_plugin"]
