from overlaykit.window import Window, WindowManager


class FakeToplevel:
    def __init__(self):
        self.configured = []

    def configure(self, width, height):
        self.configured.append((width, height))


def test_new_window_is_empty():
    window = Window(FakeToplevel())
    assert (window.pos_x, window.pos_y, window.size_x, window.size_y) == (0, 0, 0, 0)
    assert not window.contains(0, 0)


def test_set_size_configures_toplevel():
    toplevel = FakeToplevel()
    window = Window(toplevel)
    window.set_size(640, 480)
    assert toplevel.configured == [(640, 480)]
    assert (window.size_x, window.size_y) == (640, 480)


def test_set_size_without_configure_support():
    window = Window(object())
    window.set_size(10, 20)
    assert (window.size_x, window.size_y) == (10, 20)


def test_contains_edges():
    window = Window(FakeToplevel())
    window.set_pos(100, 50)
    window.set_size(200, 100)
    assert window.contains(100, 50)
    assert window.contains(299, 149)
    assert not window.contains(300, 50)
    assert not window.contains(100, 150)
    assert not window.contains(99, 60)


def test_manager_create_and_find():
    manager = WindowManager()
    a, b = FakeToplevel(), FakeToplevel()
    ha = manager.create_window(a)
    hb = manager.create_window(b)
    assert manager.find_window_handle(a) == ha
    assert manager.find_window_handle(b) == hb
    assert manager.windows.get(ha).toplevel is a


def test_manager_find_missing():
    manager = WindowManager()
    manager.create_window(FakeToplevel())
    assert manager.find_window_handle(FakeToplevel()) is None