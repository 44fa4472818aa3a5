"""Sample knowledge base used by the demo command."""

SAMPLE_DOCUMENTS = [
    {
        "id": "ai-basics",
        "title": "Introduction to Artificial Intelligence",
        "content": """
        Artificial Intelligence (AI) is a branch of computer science concerned with building
        machines that perceive, reason and act in ways we associate with human intelligence.
        Typical AI tasks include visual perception, speech recognition, decision-making and
        translation between languages.

        Machine learning is a subset of AI in which systems improve from experience instead of
        being explicitly programmed. Deep learning, a subset of machine learning, stacks many
        layers of neural networks to model complex patterns in data.

        AI applications now range from recommendation engines and chatbots to autonomous
        vehicles and medical diagnosis, and progress continues in language processing,
        computer vision and robotics.
        """,
    },
    {
        "id": "ml-algorithms",
        "title": "Machine Learning Algorithms Overview",
        "content": """
        Machine learning algorithms fall into three broad families: supervised learning,
        unsupervised learning and reinforcement learning.

        Supervised algorithms learn from labeled examples to predict outcomes for unseen data.
        Linear regression predicts continuous values, while decision trees, random forests and
        support vector machines classify inputs into categories.

        Unsupervised algorithms look for structure in unlabeled data. Clustering methods such as
        k-means group similar points, and dimensionality reduction such as PCA helps visualize
        high-dimensional data.

        Reinforcement learning trains agents to take sequences of actions by rewarding good
        outcomes and penalizing bad ones, with notable results in games and robotics.
        """,
    },
    {
        "id": "nlp-guide",
        "title": "Natural Language Processing Fundamentals",
        "content": """
        Natural Language Processing (NLP) studies how computers can understand, interpret and
        generate human language.

        Core NLP tasks include tokenization, part-of-speech tagging, named entity recognition,
        sentiment analysis and machine translation. Modern systems rely on transformer
        architectures such as BERT and GPT.

        Text embeddings are numeric representations of text that capture meaning. Vector
        databases store these embeddings for fast similarity search, which powers semantic
        search and retrieval-augmented generation.
        """,
    },
    {
        "id": "vector-databases",
        "title": "Vector Databases and Semantic Search",
        "content": """
        Vector databases are storage systems built for high-dimensional vectors. Instead of rows
        and columns they hold embeddings that represent the meaning of data.

        They excel at similarity search: finding the stored vectors closest to a query vector
        under cosine similarity, Euclidean distance or dot product. Recommendation, image search
        and document retrieval all depend on this capability.

        Retrieval-Augmented Generation (RAG) combines a vector database with a language model.
        Relevant context retrieved through semantic search lets the model give more accurate,
        grounded answers.
        """,
    },
    {
        "id": "embeddings-explained",
        "title": "Understanding Text Embeddings",
        "content": """
        Text embeddings are dense vectors that place words, phrases and documents with similar
        meanings close together, unlike bag-of-words models that treat words independently.

        Early word embeddings such as Word2Vec and GloVe showed that vector arithmetic can capture
        relationships, as in the classic example king - man + woman = queen.

        Modern sentence embedding models produce contextual vectors, so the same word can be
        represented differently depending on its surroundings. Embeddings drive semantic search,
        document clustering and recommendation systems.
        """,
    },
]

SAMPLE_QUERIES = [
    "What are vector databases and how do they work?",
    "Explain different types of machine learning algorithms",
    "How do text embeddings capture semantic meaning?",
    "What is the relationship between AI and machine learning?",
    "Tell me about RAG systems and their applications",
]

SAMPLE_WORDS = [
    "happy", "joyful", "cheerful", "sad", "unhappy", "miserable",
    "dog", "cat", "puppy", "kitten",
    "car", "truck", "bicycle",
]
