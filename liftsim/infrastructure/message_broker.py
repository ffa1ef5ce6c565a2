import simpy


class MessageBroker:
    """
    Mediates communication between the lift and its observers.
    Implements a topic-based publish-subscribe model.

    Messages are delivered two ways:
    - SimPy Stores (one per topic, plus a global broadcast pipe) for
      processes that wait on messages inside the simulation
    - plain callbacks registered with subscribe(), invoked synchronously
      on publish, for renderers outside the simulation
    """
    def __init__(self, env: simpy.Environment, verbose: bool = False):
        """
        Initialize the message broker

        Args:
            env (simpy.Environment): SimPy environment
            verbose (bool): Print every published message to the console
        """
        self.env = env
        self.verbose = verbose
        self.topics = {}  # Dictionary to hold Store for each topic
        self.broadcast_pipe = simpy.Store(self.env)
        self._subscribers = []  # (topic_prefix, callback)

    def get_pipe(self, topic: str) -> simpy.Store:
        """
        Get or create a communication pipe (Store) for the specified topic
        """
        if topic not in self.topics:
            self.topics[topic] = simpy.Store(self.env)
        return self.topics[topic]

    def put(self, topic: str, message):
        """
        Publish (put) a message to the specified topic

        The topic Store only receives the message once get() or get_pipe()
        has created it; put() never creates one. The broadcast pipe and
        subscribe() callbacks see every message.
        """
        if self.verbose:
            print(f"{self.env.now:.2f} [Broker] Publish on '{topic}': {message}")
        self.broadcast_pipe.put({'topic': topic, 'message': message})
        for prefix, callback in list(self._subscribers):
            if topic.startswith(prefix):
                callback(topic, message)
        pipe = self.topics.get(topic)
        if pipe is None:
            return None
        return pipe.put(message)

    def get(self, topic: str):
        """
        Wait to receive (get) a message from the specified topic
        """
        pipe = self.get_pipe(topic)
        return pipe.get()

    def subscribe(self, callback, topic_prefix: str = ""):
        """
        Register a callback invoked as callback(topic, message) for every
        message whose topic starts with topic_prefix.
        """
        self._subscribers.append((topic_prefix, callback))

    def unsubscribe(self, callback):
        """Remove every registration of callback"""
        self._subscribers = [(p, cb) for p, cb in self._subscribers if cb is not callback]

    def get_broadcast_pipe(self) -> simpy.Store:
        """
        Method for Statistics class to access this pipe
        Returns the global broadcast pipe
        """
        return self.broadcast_pipe

    def get_current_time(self) -> float:
        """
        Get current simulation time
        """
        return self.env.now
