pytest_plugins = ["throwaway.pytest_plugin"]
