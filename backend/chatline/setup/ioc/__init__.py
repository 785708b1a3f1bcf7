from chatline.setup.ioc.container import AppProvider, MemoryStoreProvider, create_container

__all__ = ["AppProvider", "MemoryStoreProvider", "create_container"]
